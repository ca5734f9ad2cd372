from __future__ import annotations

import math

import pytest

from calastro.core.ephemeris import (
    J2000,
    dynamical_from_universal,
    ephemeris_correction,
    julian_centuries,
    sidereal_from_moment,
    universal_from_dynamical,
)
from calastro.core.gregorian import fixed_from_gregorian


def _delta_t_seconds(year: int) -> float:
    return ephemeris_correction(fixed_from_gregorian(year, 7, 1)) * 86400


@pytest.mark.parametrize(
    "year,seconds",
    [
        (2100, 259.02),
        (2010, 66.7006),
        (2000, 63.86),
        (1700, 8.118780842),
        (1600, 120.0),
        (1000, 1574.2),
        (0, 10583.6),
        (-600, 18720.48),
    ],
)
def test_delta_t_reference_values(year, seconds):
    assert _delta_t_seconds(year) == pytest.approx(seconds, rel=1e-9)


def test_delta_t_centurial_branch():
    # 1800..1986 polynomials are evaluated in days of a centurial argument
    assert 25.0 < _delta_t_seconds(1950) < 33.0
    assert math.trunc(ephemeris_correction(fixed_from_gregorian(1900, 7, 1)) * 1e6) == -17
    assert math.trunc(ephemeris_correction(fixed_from_gregorian(1945, 7, 1)) * 1e6) == 310


def test_delta_t_boundaries_pick_their_own_range():
    # 2050 and 2051 fall on either side of a range boundary
    assert _delta_t_seconds(2050) == pytest.approx(62.92 + 0.32217 * 50 + 0.005589 * 2500)
    assert _delta_t_seconds(2051) == pytest.approx(-20 + 32 * 2.31 ** 2 + 0.5628 * 99)
    # -500 itself falls in the outer parabola
    assert _delta_t_seconds(-500) == pytest.approx(-20 + 32 * 23.2 ** 2)


def test_dynamical_round_trip():
    for t in (J2000, 500000.25, 760000.75):
        assert universal_from_dynamical(dynamical_from_universal(t)) == pytest.approx(t, abs=1e-9)


def test_julian_centuries_at_j2000():
    assert julian_centuries(J2000) == pytest.approx(0.0, abs=1e-6)
    assert julian_centuries(J2000 + 36525) == pytest.approx(1.0, abs=1e-5)


def test_sidereal_time():
    assert sidereal_from_moment(J2000) == pytest.approx(280.46061837)
    for t in (J2000 - 1000.3, J2000 + 12345.6):
        assert 0.0 <= sidereal_from_moment(t) < 360.0
