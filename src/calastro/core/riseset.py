# src/calastro/core/riseset.py
from __future__ import annotations

import logging
import math

from .angles import (
    arccos_degrees,
    arcminutes,
    arcsin_degrees,
    arcseconds,
    arctan_degrees,
    cos_degrees,
    degrees_minutes_seconds,
    mod3,
    sin_degrees,
    tan_degrees,
)
from .config import DEFAULT_SEARCH, SearchConfig
from .location import (
    PADUA,
    Location,
    local_from_standard,
    standard_from_local,
    standard_from_universal,
    universal_from_local,
    universal_from_standard,
)
from .lunar import topocentric_lunar_altitude
from .newmoon import lunar_phase
from .results import NO_EVENT, MaybeMoment, is_event
from .rootfind import binary_search
from .solar import declination, solar_longitude
from .timescales import local_from_apparent, midday
from .timeutil import fixed_from_moment, hours, minutes, time_from_moment

log = logging.getLogger(__name__)

MORNING = True
EVENING = False

_EARTH_RADIUS = 6372000


def sine_offset(tee: float, location: Location, alpha: float) -> float:
    """
    Sine of the angle between the sun's position at local time ``tee`` and
    its position at depression ``alpha``. Outside [-1, 1] when the sun
    never reaches that depression.
    """
    t_prime = universal_from_local(tee, location)
    delta = declination(t_prime, 0, solar_longitude(t_prime))
    phi = location.latitude
    return tan_degrees(phi) * tan_degrees(delta) + sin_degrees(alpha) / (
        cos_degrees(delta) * cos_degrees(phi)
    )


def approx_moment_of_depression(tee: float, location: Location, alpha: float, early: bool) -> MaybeMoment:
    """
    Local time near ``tee`` when the sun's depression is ``alpha`` (negative
    above the horizon); ``early`` selects the morning event.
    """
    first = sine_offset(tee, location, alpha)
    fixed = fixed_from_moment(tee)
    if alpha >= 0:
        alt = fixed if early else fixed + 1
    else:
        alt = fixed + hours(12)
    value = sine_offset(alt, location, alpha) if abs(first) > 1 else first

    if abs(value) > 1:
        return NO_EVENT
    offset = mod3(arcsin_degrees(value) / 360, hours(-12), hours(12))
    apparent = fixed + (hours(6) - offset if early else hours(18) + offset)
    return local_from_apparent(apparent, location)


def moment_of_depression(
    approx: float,
    location: Location,
    alpha: float,
    early: bool,
    *,
    config: SearchConfig = DEFAULT_SEARCH,
) -> MaybeMoment:
    """
    Refine approx_moment_of_depression until successive estimates agree to
    ``config.depression_tolerance``. Local time, or NO_EVENT.
    """
    estimate = approx
    while True:
        tee = approx_moment_of_depression(estimate, location, alpha, early)
        if not is_event(tee):
            return NO_EVENT
        if abs(estimate - tee) < config.depression_tolerance:
            return tee
        estimate = tee


def dawn(fixed: int, location: Location, alpha: float, *, config: SearchConfig = DEFAULT_SEARCH) -> MaybeMoment:
    """Standard time of morning depression ``alpha`` on ``fixed``, or NO_EVENT."""
    result = moment_of_depression(fixed + hours(6), location, alpha, MORNING, config=config)
    if not is_event(result):
        log.debug("no dawn at %s deg on %s for %s", alpha, fixed, location)
        return NO_EVENT
    return standard_from_local(result, location)


def dusk(fixed: int, location: Location, alpha: float, *, config: SearchConfig = DEFAULT_SEARCH) -> MaybeMoment:
    """Standard time of evening depression ``alpha`` on ``fixed``, or NO_EVENT."""
    result = moment_of_depression(fixed + hours(18), location, alpha, EVENING, config=config)
    if not is_event(result):
        log.debug("no dusk at %s deg on %s for %s", alpha, fixed, location)
        return NO_EVENT
    return standard_from_local(result, location)


def refraction(tee: float, location: Location) -> float:
    """
    Refraction at the horizon plus the dip for the observer's elevation
    (degrees). ``tee`` is unused.
    """
    h = max(0.0, location.elevation)
    dip = arccos_degrees(_EARTH_RADIUS / (_EARTH_RADIUS + h))
    return arcminutes(34) + dip + arcseconds(19) * math.sqrt(h)


def sunrise(fixed: int, location: Location, *, config: SearchConfig = DEFAULT_SEARCH) -> MaybeMoment:
    alpha = refraction(fixed + hours(6), location) + arcminutes(16)
    return dawn(fixed, location, alpha, config=config)


def sunset(fixed: int, location: Location, *, config: SearchConfig = DEFAULT_SEARCH) -> MaybeMoment:
    alpha = refraction(fixed + hours(18), location) + arcminutes(16)
    return dusk(fixed, location, alpha, config=config)


def jewish_sabbath_ends(fixed: int, location: Location) -> MaybeMoment:
    return dusk(fixed, location, degrees_minutes_seconds(7, 5, 0))


def jewish_dusk(fixed: int, location: Location) -> MaybeMoment:
    return dusk(fixed, location, degrees_minutes_seconds(4, 40, 0))


def observed_lunar_altitude(tee: float, location: Location) -> float:
    """
    Observed altitude of the moon's upper limb, with refraction and the
    observer's elevation (degrees).
    """
    return topocentric_lunar_altitude(tee, location) + refraction(tee, location) + arcminutes(16)


def _rise_or_set(fixed: int, location: Location, rising: bool, config: SearchConfig) -> MaybeMoment:
    t = universal_from_standard(fixed, location)
    phase = lunar_phase(t)
    co_latitude = 90 - abs(location.latitude)
    # at a pole the altitude gives no hour-angle estimate; the bracketed search decides
    offset = observed_lunar_altitude(t, location) / (4 * co_latitude) if co_latitude > 0 else 0.0

    if rising:
        waning = phase > 180
        if waning and offset > 0:
            approx = t + 1 - offset
        elif waning:
            approx = t - offset
        else:
            approx = t + 0.5 + offset
    else:
        waxing = phase < 180
        if waxing and offset > 0:
            approx = t + offset
        elif waxing:
            approx = t + 1 + offset
        else:
            approx = t - offset + 0.5

    def go_left(x: float) -> bool:
        alt = observed_lunar_altitude(x, location)
        return alt > 0 if rising else alt < 0

    event = binary_search(
        approx - config.riseset_window,
        approx + config.riseset_window,
        lambda lo, hi: hi - lo < config.riseset_tolerance,
        go_left,
    )
    if event < t + 1:
        return max(standard_from_universal(event, location), fixed)
    log.debug("no moon%s on %s for %s", "rise" if rising else "set", fixed, location)
    return NO_EVENT


def moonrise(fixed: int, location: Location, *, config: SearchConfig = DEFAULT_SEARCH) -> MaybeMoment:
    """Standard time of moonrise on ``fixed``, or NO_EVENT."""
    return _rise_or_set(fixed, location, True, config)


def moonset(fixed: int, location: Location, *, config: SearchConfig = DEFAULT_SEARCH) -> MaybeMoment:
    """Standard time of moonset on ``fixed``, or NO_EVENT."""
    return _rise_or_set(fixed, location, False, config)


def daytime_temporal_hour(fixed: int, location: Location) -> MaybeMoment:
    """One twelfth of daylight on ``fixed`` (days), or NO_EVENT."""
    rise = sunrise(fixed, location)
    fall = sunset(fixed, location)
    if not (is_event(rise) and is_event(fall)):
        return NO_EVENT
    return (fall - rise) / 12


def nighttime_temporal_hour(fixed: int, location: Location) -> MaybeMoment:
    """One twelfth of the night following ``fixed`` (days), or NO_EVENT."""
    rise = sunrise(fixed + 1, location)
    fall = sunset(fixed, location)
    if not (is_event(rise) and is_event(fall)):
        return NO_EVENT
    return (rise - fall) / 12


def standard_from_sundial(tee: float, location: Location) -> MaybeMoment:
    """
    Standard time of temporal (seasonal-hour) moment ``tee``, where 6:00 is
    sunrise and 18:00 sunset. NO_EVENT when the temporal hour is undefined.
    """
    fixed = fixed_from_moment(tee)
    time = 24 * time_from_moment(tee)
    if 6 <= time <= 18:
        h = daytime_temporal_hour(fixed, location)
    elif time < 6:
        h = nighttime_temporal_hour(fixed - 1, location)
    else:
        h = nighttime_temporal_hour(fixed, location)
    if not is_event(h):
        return NO_EVENT

    if 6 <= time <= 18:
        return sunrise(fixed, location) + (time - 6) * h
    if time < 6:
        return sunset(fixed - 1, location) + (time + 6) * h
    return sunset(fixed, location) + (time - 18) * h


def jewish_morning_end(fixed: int, location: Location) -> MaybeMoment:
    return standard_from_sundial(fixed + hours(10), location)


def _asr(fixed: int, location: Location, shadow: float) -> MaybeMoment:
    noon = midday(fixed, location)
    phi = location.latitude
    delta = declination(noon, 0, solar_longitude(noon))
    altitude = mod3(
        arcsin_degrees(cos_degrees(delta) * cos_degrees(phi) + sin_degrees(delta) * sin_degrees(phi)),
        -180,
        180,
    )
    if altitude <= 0:
        # no shadow at noon
        return NO_EVENT
    h = mod3(arctan_degrees(tan_degrees(altitude), shadow * tan_degrees(altitude) + 1), -90, 90)
    return dusk(fixed, location, -h)


def asr(fixed: int, location: Location) -> MaybeMoment:
    """Standard time of asr by the Hanafi rule (shadow twice the object plus noon shadow)."""
    return _asr(fixed, location, 2)


def alt_asr(fixed: int, location: Location) -> MaybeMoment:
    """Standard time of asr by the Shafi'i rule."""
    return _asr(fixed, location, 1)


def local_zero_hour(tee: float) -> float:
    """Local time of Italian-hours midnight: half an hour after Padua sunset."""
    fixed = fixed_from_moment(tee)
    sunset_padua = dusk(fixed, PADUA, arcminutes(16)) + minutes(30)
    return local_from_standard(sunset_padua, PADUA)


def local_from_italian(tee: float) -> float:
    fixed = fixed_from_moment(tee)
    z = local_zero_hour(tee - 1)
    return tee - fixed + z


def italian_from_local(t_local: float) -> float:
    fixed = fixed_from_moment(t_local)
    z0 = local_zero_hour(t_local - 1)
    z = local_zero_hour(t_local)
    if t_local > z:
        return t_local + fixed + 1 - z
    return t_local + fixed - z0
