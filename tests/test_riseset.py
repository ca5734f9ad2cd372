from __future__ import annotations

import pytest

from calastro.core.gregorian import fixed_from_gregorian
from calastro.core.location import CFS_ALERT, GREENWICH, MECCA, Location
from calastro.core.results import NO_EVENT, is_event
from calastro.core.riseset import (
    alt_asr,
    asr,
    dawn,
    daytime_temporal_hour,
    dusk,
    italian_from_local,
    jewish_dusk,
    jewish_sabbath_ends,
    local_from_italian,
    moonrise,
    moonset,
    nighttime_temporal_hour,
    standard_from_sundial,
    sunrise,
    sunset,
)
from calastro.core.timeutil import hours, minutes

SOLSTICE = fixed_from_gregorian(2000, 6, 21)
EQUINOX = fixed_from_gregorian(2000, 3, 20)
POLAR = Location(80.0, 0.0, 0.0, 0.0)


def test_greenwich_midsummer_sunrise_sunset():
    rise = sunrise(SOLSTICE, GREENWICH)
    fall = sunset(SOLSTICE, GREENWICH)
    assert rise == pytest.approx(SOLSTICE + hours(3 + 43 / 60), abs=minutes(20))
    assert fall == pytest.approx(SOLSTICE + hours(20 + 21 / 60), abs=minutes(20))


def test_twilight_ordering():
    d = EQUINOX
    civil_dawn = dawn(d, GREENWICH, 6.0)
    civil_dusk = dusk(d, GREENWICH, 6.0)
    assert civil_dawn < sunrise(d, GREENWICH) < sunset(d, GREENWICH) < civil_dusk
    assert sunset(d, GREENWICH) < jewish_dusk(d, GREENWICH) < jewish_sabbath_ends(d, GREENWICH)


@pytest.mark.parametrize("fixed", [SOLSTICE, fixed_from_gregorian(2000, 12, 21)])
def test_polar_sun_has_no_rise(fixed):
    assert sunrise(fixed, POLAR) is NO_EVENT
    assert sunset(fixed, POLAR) is NO_EVENT
    assert daytime_temporal_hour(fixed, POLAR) is NO_EVENT


def test_monthly_missing_moonset():
    start = fixed_from_gregorian(2000, 1, 1)
    results = [(d, moonset(d, MECCA)) for d in range(start, start + 35)]
    missing = [d for d, t in results if t is NO_EVENT]
    assert missing
    for d, t in results:
        if is_event(t):
            assert d <= t < d + 1


def test_moonrise_within_day():
    start = fixed_from_gregorian(2000, 1, 1)
    found = 0
    for d in range(start, start + 10):
        t = moonrise(d, MECCA)
        if is_event(t):
            found += 1
            assert d <= t < d + 1
    assert found >= 8


def test_temporal_hours_at_equinox():
    equator = Location(0.0, 0.0, 0.0, 0.0)
    assert daytime_temporal_hour(EQUINOX, equator) == pytest.approx(hours(1), abs=minutes(1))
    assert nighttime_temporal_hour(EQUINOX, equator) == pytest.approx(hours(1), abs=minutes(1))
    # temporal 06:00 is sunrise
    assert standard_from_sundial(EQUINOX + hours(6), equator) == pytest.approx(sunrise(EQUINOX, equator))


def test_asr_afternoon_order():
    d = SOLSTICE
    shafii = alt_asr(d, MECCA)
    hanafi = asr(d, MECCA)
    assert d + 0.5 < shafii < hanafi < sunset(d, MECCA)


def test_asr_without_noon_sun():
    assert asr(fixed_from_gregorian(2000, 12, 21), CFS_ALERT) is NO_EVENT


def test_italian_hours_round_trip():
    t = fixed_from_gregorian(2000, 5, 1) + 0.5
    assert italian_from_local(local_from_italian(t)) == pytest.approx(t, abs=1e-9)


@pytest.mark.parametrize("latitude", [90.0, -90.0])
@pytest.mark.parametrize("event", [moonrise, moonset])
def test_moon_events_at_the_poles(event, latitude):
    pole = Location(latitude, 0.0, 0.0, 0.0)
    start = fixed_from_gregorian(2000, 1, 1)
    for d in range(start, start + 30):
        t = event(d, pole)
        if is_event(t):
            assert d <= t < d + 1
