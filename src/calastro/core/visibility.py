# src/calastro/core/visibility.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from .angles import arccos_degrees, cos_degrees, poly
from .config import CRESCENT_CRITERIA, DEFAULT_SEARCH, DEFAULT_VISIBILITY, SearchConfig, VisibilityConfig
from .location import BABYLON, MECCA, Location, universal_from_standard
from .lunar import lunar_altitude, lunar_latitude, lunar_semi_diameter
from .newmoon import FIRST_QUARTER, NEW, lunar_phase, lunar_phase_at_or_before, new_moon_before
from .results import NO_EVENT, MaybeMoment, is_event
from .riseset import dusk, moonset, sunset
from .rootfind import next_index
from .solar import solar_altitude
from .timeutil import fixed_from_moment, hours

log = logging.getLogger(__name__)

DayPredicate = Callable[[int], bool]


def arc_of_light(tee: float) -> float:
    """Angular separation of sun and moon (degrees)."""
    return arccos_degrees(cos_degrees(lunar_latitude(tee)) * cos_degrees(lunar_phase(tee)))


def arc_of_vision(tee: float, location: Location) -> float:
    """Moon altitude minus sun altitude (degrees)."""
    return lunar_altitude(tee, location) - solar_altitude(tee, location)


def simple_best_view(fixed: int, location: Location, *, config: VisibilityConfig = DEFAULT_VISIBILITY) -> float:
    """
    Universal time of best crescent viewing on the evening of ``fixed``:
    dusk at a 4.5 degree depression, or the following midnight if there is none.
    """
    dark = dusk(fixed, location, config.best_view_depression)
    best = dark if is_event(dark) else fixed + 1
    return universal_from_standard(best, location)


def bruin_best_view(fixed: int, location: Location) -> float:
    """
    Universal time of best crescent viewing per Bruin: 4/9 of the way from
    sunset to moonset.
    """
    sun = sunset(fixed, location)
    moon = moonset(fixed, location)
    if is_event(sun) and is_event(moon):
        best = (5 / 9) * sun + (4 / 9) * moon
    else:
        best = fixed + 1
    return universal_from_standard(best, location)


def _waxing_crescent(phase: float) -> bool:
    return NEW < phase < FIRST_QUARTER


def shaukat_criterion(fixed: int, location: Location, *, config: VisibilityConfig = DEFAULT_VISIBILITY) -> bool:
    """
    Shaukat's criterion for a likely sighting on the eve of ``fixed``.
    Not meant for high latitudes.
    """
    tee = simple_best_view(fixed - 1, location, config=config)
    phase = lunar_phase(tee)
    h = lunar_altitude(tee, location)
    arcl = arc_of_light(tee)
    return (
        _waxing_crescent(phase)
        and config.shaukat_min_arc_of_light <= arcl <= config.shaukat_max_arc_of_light
        and h > config.shaukat_min_altitude
    )


def yallop_criterion(fixed: int, location: Location, *, config: VisibilityConfig = DEFAULT_VISIBILITY) -> bool:
    """
    Yallop's criterion for a possible sighting on the eve of ``fixed``.
    Not meant for high latitudes.
    """
    tee = bruin_best_view(fixed - 1, location)
    phase = lunar_phase(tee)
    d = lunar_semi_diameter(tee, location)
    arcl = arc_of_light(tee)
    w = d * (1 - cos_degrees(arcl))
    arcv = arc_of_vision(tee, location)
    q1 = poly(w, config.yallop_q1)
    return _waxing_crescent(phase) and arcv > q1 + config.yallop_e


def moonlag(fixed: int, location: Location) -> MaybeMoment:
    """
    Moonset minus sunset on ``fixed`` (days). NO_EVENT without a sunset,
    a full day when the moon does not set.
    """
    sun = sunset(fixed, location)
    if not is_event(sun):
        return NO_EVENT
    moon = moonset(fixed, location)
    if not is_event(moon):
        return hours(24)
    return moon - sun


def _moonlag_exceeds(fixed: int, location: Location, threshold: float) -> bool:
    lag = moonlag(fixed, location)
    return is_event(lag) and lag > threshold


def _sunset_universal(fixed: int, location: Location) -> MaybeMoment:
    st = sunset(fixed, location)
    if not is_event(st):
        return NO_EVENT
    return universal_from_standard(st, location)


def babylonian_criterion(
    fixed: int,
    location: Location = BABYLON,
    *,
    config: VisibilityConfig = DEFAULT_VISIBILITY,
) -> bool:
    """
    Moonlag criterion on the eve of ``fixed``: moon older than a day and
    setting more than 48 minutes after the sun.
    """
    tee = _sunset_universal(fixed - 1, location)
    if not is_event(tee):
        return False
    return (
        _waxing_crescent(lunar_phase(tee))
        and new_moon_before(tee) <= tee - hours(24)
        and _moonlag_exceeds(fixed - 1, location, config.babylonian_min_lag)
    )


def saudi_criterion(
    fixed: int,
    location: Location = MECCA,
    *,
    config: VisibilityConfig = DEFAULT_VISIBILITY,
) -> bool:
    """Moon sets after the sun on the eve of ``fixed`` (Umm al-Qura rule)."""
    tee = _sunset_universal(fixed - 1, location)
    if not is_event(tee):
        return False
    return _waxing_crescent(lunar_phase(tee)) and _moonlag_exceeds(
        fixed - 1, location, config.saudi_min_lag
    )


_CRITERIA: Dict[str, Callable[..., bool]] = {
    "shaukat": shaukat_criterion,
    "yallop": yallop_criterion,
    "saudi": saudi_criterion,
    "babylonian": babylonian_criterion,
}


def visible_crescent(
    fixed: int,
    location: Location,
    *,
    criterion: Optional[str] = None,
    config: VisibilityConfig = DEFAULT_VISIBILITY,
) -> bool:
    """
    Whether the crescent is likely visible on the eve of ``fixed`` at
    ``location``. ``criterion`` defaults to ``config.criterion``.
    """
    name = (criterion or config.criterion).lower()
    try:
        check = _CRITERIA[name]
    except KeyError:
        raise ValueError(f"unknown crescent criterion: {name!r} (expected one of {CRESCENT_CRITERIA})") from None
    return check(fixed, location, config=config)


def _crescent_predicate(location: Location, criterion: Optional[str], config: VisibilityConfig) -> DayPredicate:
    def pred(d: int) -> bool:
        return visible_crescent(d, location, criterion=criterion, config=config)

    return pred


def new_month_on_or_before(
    fixed: int,
    predicate: DayPredicate,
    *,
    search: SearchConfig = DEFAULT_SEARCH,
) -> int:
    """
    Closest day on or before ``fixed`` on whose eve ``predicate`` first
    held after the preceding conjunction.
    """
    moon = fixed_from_moment(lunar_phase_at_or_before(NEW, fixed, config=search))
    age = fixed - moon
    tau = moon - 30 if age <= 3 and not predicate(fixed) else moon
    return next_index(tau, predicate, limit=search.search_limit)


def phasis_on_or_before(
    fixed: int,
    location: Location,
    *,
    criterion: Optional[str] = None,
    config: VisibilityConfig = DEFAULT_VISIBILITY,
    search: SearchConfig = DEFAULT_SEARCH,
) -> int:
    """Closest day on or before ``fixed`` when the crescent first became visible."""
    return new_month_on_or_before(fixed, _crescent_predicate(location, criterion, config), search=search)


def phasis_on_or_after(
    fixed: int,
    location: Location,
    *,
    criterion: Optional[str] = None,
    config: VisibilityConfig = DEFAULT_VISIBILITY,
    search: SearchConfig = DEFAULT_SEARCH,
) -> int:
    """Closest day on or after ``fixed`` on whose eve the crescent first becomes visible."""
    pred = _crescent_predicate(location, criterion, config)
    moon = fixed_from_moment(lunar_phase_at_or_before(NEW, fixed, config=search))
    age = fixed - moon
    tau = moon + 29 if age >= 4 or pred(fixed - 1) else fixed
    return next_index(tau, pred, limit=search.search_limit)
