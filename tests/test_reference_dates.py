from __future__ import annotations

import math

import pytest

from calastro.core.ephemeris import ephemeris_correction
from calastro.core.gregorian import fixed_from_gregorian
from calastro.core.lunar import lunar_latitude, lunar_longitude
from calastro.core.newmoon import new_moon_at_or_after
from calastro.core.solar import solar_longitude

# Calendrical Calculations sample data, first row (R.D. -214193)
FIXED = -214193


def _trunc(x: float, places: int) -> int:
    return math.trunc(x * 10 ** places)


@pytest.mark.parametrize(
    "fixed,expected",
    [
        (FIXED, 214169),
        # centurial branch, 1900..1986
        (fixed_from_gregorian(1945, 11, 12), 310),
    ],
)
def test_ephemeris_correction_to_six_places(fixed, expected):
    assert _trunc(ephemeris_correction(fixed), 6) == expected


def test_solar_longitude_at_noon():
    value = _trunc(solar_longitude(FIXED + 0.5), 6) / 1e6
    assert abs(value - 119.473431) < 1.1e-6


def test_lunar_position_at_midnight():
    assert _trunc(lunar_longitude(FIXED), 3) == 244853
    assert _trunc(lunar_latitude(FIXED), 3) == 2452


def test_next_new_moon():
    assert _trunc(new_moon_at_or_after(FIXED), 3) == -214174605


def test_series_table_sizes():
    from calastro.core import lunar, newmoon, solar

    assert {len(t) for t in (solar._SOLAR_X, solar._SOLAR_Y, solar._SOLAR_Z)} == {49}
    assert {len(t) for t in (lunar._LON_V, lunar._LON_W, lunar._LON_X, lunar._LON_Y, lunar._LON_Z)} == {59}
    assert {len(t) for t in (lunar._LAT_V, lunar._LAT_W, lunar._LAT_X, lunar._LAT_Y, lunar._LAT_Z)} == {60}
    assert {len(t) for t in (lunar._DIST_V, lunar._DIST_W, lunar._DIST_X, lunar._DIST_Y, lunar._DIST_Z)} == {60}
    assert {len(t) for t in (newmoon._NM_V, newmoon._NM_W, newmoon._NM_X, newmoon._NM_Y, newmoon._NM_Z)} == {24}
    assert {len(t) for t in (newmoon._ADD_I, newmoon._ADD_J, newmoon._ADD_L)} == {13}


def test_every_crescent_criterion_is_wired():
    from calastro.core import visibility
    from calastro.core.config import CRESCENT_CRITERIA

    assert set(visibility._CRITERIA) == set(CRESCENT_CRITERIA)
