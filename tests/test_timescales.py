from __future__ import annotations

import pytest

from calastro.core.location import (
    GREENWICH,
    MECCA,
    TEHRAN,
    URBANA,
    Location,
    direction,
    local_from_standard,
    local_from_universal,
    standard_from_local,
    standard_from_universal,
    universal_from_local,
    universal_from_standard,
)
from calastro.core.results import TimeScaleError
from calastro.core.timescales import (
    ScaledMoment,
    TimeScale,
    apparent_from_local,
    apparent_from_universal,
    local_from_apparent,
    midday,
    midnight,
    require_scale,
    universal_from_apparent,
)
from calastro.core.timeutil import hours, minutes

T = 730200.37


@pytest.mark.parametrize("loc", [GREENWICH, URBANA, MECCA, TEHRAN])
def test_location_round_trips(loc):
    assert universal_from_local(local_from_universal(T, loc), loc) == pytest.approx(T, abs=1e-12)
    assert universal_from_standard(standard_from_universal(T, loc), loc) == pytest.approx(T, abs=1e-12)
    assert local_from_standard(standard_from_local(T, loc), loc) == pytest.approx(T, abs=1e-12)


@pytest.mark.parametrize("loc", [GREENWICH, URBANA, MECCA])
def test_apparent_round_trip(loc):
    assert local_from_apparent(apparent_from_local(T, loc), loc) == pytest.approx(T, abs=1e-6)
    assert universal_from_apparent(apparent_from_universal(T, loc), loc) == pytest.approx(T, abs=1e-6)


def test_midday_and_midnight_near_clock_noon_at_greenwich():
    fixed = 730300
    noon = midday(fixed, GREENWICH)
    assert abs(noon - (fixed + 0.5)) < minutes(17)
    night = midnight(fixed, GREENWICH)
    assert abs(night - fixed) < minutes(17)


def test_location_validation():
    with pytest.raises(ValueError):
        Location(91.0, 0.0)
    with pytest.raises(ValueError):
        Location(0.0, 0.0, 0.0, 0.75)
    with pytest.raises(ValueError):
        Location(float("nan"), 0.0)


def test_direction_to_mecca():
    # qibla from Urbana is roughly northeast
    assert 10.0 < direction(URBANA, MECCA) < 20.0
    assert direction(GREENWICH, Location(90.0, 0.0)) == 0.0


def test_scaled_moment_needs_location():
    with pytest.raises(TimeScaleError):
        ScaledMoment(T, TimeScale.STANDARD)
    # TimeScaleError is also a ValueError
    with pytest.raises(ValueError):
        ScaledMoment.universal(T).to(TimeScale.LOCAL)


def test_scaled_moment_conversions():
    u = ScaledMoment.universal(T)
    st = u.to(TimeScale.STANDARD, MECCA)
    assert st.value == pytest.approx(T + hours(3))
    assert st.location == MECCA
    assert st.as_universal() == pytest.approx(T)

    app = st.to(TimeScale.APPARENT)
    assert app.location == MECCA
    assert app.as_universal() == pytest.approx(T, abs=1e-6)

    dyn = u.to(TimeScale.DYNAMICAL)
    assert dyn.location is None
    assert dyn.value > T
    assert dyn.as_universal() == pytest.approx(T, abs=1e-9)


def test_require_scale():
    st = ScaledMoment(T, TimeScale.STANDARD, MECCA)
    assert require_scale(st, TimeScale.STANDARD) == T
    with pytest.raises(TimeScaleError):
        require_scale(st, TimeScale.UNIVERSAL, "sunrise")
