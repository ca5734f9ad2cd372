from __future__ import annotations

import pytest

from calastro.core.ephemeris import universal_from_dynamical
from calastro.core.gregorian import fixed_from_gregorian
from calastro.core.location import MECCA
from calastro.core.lunar import (
    lunar_altitude,
    lunar_diameter,
    lunar_distance,
    lunar_latitude,
    lunar_longitude,
    lunar_parallax,
    topocentric_lunar_altitude,
)
from calastro.core.newmoon import lunar_phase, nth_new_moon

# 1992-04-12 0h dynamical time, the classic worked example for the lunar series
_EXAMPLE = universal_from_dynamical(fixed_from_gregorian(1992, 4, 12))


def test_lunar_position_worked_example():
    assert lunar_longitude(_EXAMPLE) == pytest.approx(133.167, abs=0.01)
    assert lunar_latitude(_EXAMPLE) == pytest.approx(-3.229, abs=0.01)
    assert lunar_distance(_EXAMPLE) == pytest.approx(368409700, rel=1e-4)


def test_lunar_ranges():
    t = 730120.0
    for _ in range(120):
        assert 0.0 <= lunar_longitude(t) < 360.0
        assert -5.4 < lunar_latitude(t) < 5.4
        assert 356_000_000 < lunar_distance(t) < 407_000_000
        assert 0.0 <= lunar_phase(t) < 360.0
        t += 1.37


def test_phase_is_zero_at_new_moons():
    for n in (24000, 24700, 25000):
        phi = lunar_phase(nth_new_moon(n))
        assert min(phi, 360.0 - phi) < 0.1


def test_new_moons_are_a_month_apart():
    gaps = [nth_new_moon(n + 1) - nth_new_moon(n) for n in range(24720, 24740)]
    assert all(29.2 < g < 29.9 for g in gaps)


def test_topocentric_altitude_below_geocentric():
    t = 730128.7
    h = lunar_altitude(t, MECCA)
    assert -90.0 <= h <= 90.0
    p = lunar_parallax(t, MECCA)
    assert 0.0 < p < 1.1
    assert topocentric_lunar_altitude(t, MECCA) == pytest.approx(h - p)


def test_lunar_diameter():
    assert 0.48 < lunar_diameter(730128.0) < 0.58
