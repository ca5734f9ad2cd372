# src/calastro/core/solarterms.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .angles import angdiff180, mod, mod3, norm360
from .config import DEFAULT_SEARCH, SearchConfig
from .gregorian import gregorian_new_year
from .location import URBANA, standard_from_universal
from .rootfind import bisect_sign_change, bracket_by_scan, invert_angular
from .solar import MEAN_TROPICAL_YEAR, WINTER, solar_longitude
from .timeutil import require_range

if TYPE_CHECKING:
    from .astronomy import AstronomyEngine

log = logging.getLogger(__name__)

ZHONGQI_DEGS = [float(x) for x in range(0, 360, 30)]
SOLAR_TERM_DEGS = [float(d) for d in range(0, 360, 15)]  # 0,15,...,345

_RATE = MEAN_TROPICAL_YEAR / 360


def solar_longitude_after(
    lam: float,
    tee: float,
    *,
    config: SearchConfig = DEFAULT_SEARCH,
) -> float:
    """
    First universal moment at or after ``tee`` when the solar longitude
    is ``lam`` degrees.
    """
    tau = tee + _RATE * mod(lam - solar_longitude(tee), 360)
    lo = max(tee, tau - 5)
    hi = tau + 5
    return invert_angular(solar_longitude, lam, lo, hi, config=config)


def estimate_prior_solar_longitude(lam: float, tee: float) -> float:
    """
    Approximate moment at or before ``tee`` when the solar longitude just
    exceeded ``lam`` degrees.
    """
    tau = tee - _RATE * mod(solar_longitude(tee) - lam, 360)
    delta = mod3(solar_longitude(tau) - lam, -180, 180)
    return min(tee, tau - _RATE * delta)


def season_in_gregorian(season: float, g_year: int) -> float:
    """Universal moment of ``season`` (a solar longitude) in Gregorian ``g_year``."""
    return solar_longitude_after(season, gregorian_new_year(g_year))


def urbana_winter(g_year: int) -> float:
    """Standard time of the December solstice in Urbana, Illinois."""
    return standard_from_universal(season_in_gregorian(WINTER, g_year), URBANA)


def _crossings_by_series(start: float, end: float, target: float, config: SearchConfig) -> List[float]:
    out: List[float] = []
    t = solar_longitude_after(target, start, config=config)
    while t < end:
        out.append(t)
        t = solar_longitude_after(target, t + 1, config=config)
    return out


def _crossings_by_scan(
    eng: "AstronomyEngine",
    start: float,
    end: float,
    target: float,
    config: SearchConfig,
) -> List[float]:
    def g(t: float) -> float:
        return angdiff180(eng.sun_lon(t) - target)

    roots: List[float] = []
    for a, b in bracket_by_scan(g, start, end, config.scan_step):
        # a sign change across +-180 is the far side of the circle, not a crossing
        if a != b and abs(g(a) - g(b)) > 180:
            continue
        r = a if a == b else bisect_sign_change(g, a, b, tol=config.scan_tolerance)
        if abs(g(r)) <= 0.01 and start <= r < end:
            roots.append(r)
        else:
            log.warning("discarded solar longitude candidate %s for target %s", r, target)

    roots.sort()
    merged: List[float] = []
    for t in roots:
        if not merged or t - merged[-1] > config.merge_window:
            merged.append(t)
    return merged


def solar_longitude_crossings(
    start: float,
    end: float,
    *,
    target_deg: float,
    engine: Optional["AstronomyEngine"] = None,
    config: SearchConfig = DEFAULT_SEARCH,
) -> List[float]:
    """
    Universal moments in [start, end) at which the solar longitude equals
    ``target_deg``.

    Without an ``engine`` the closed-form solar series is inverted directly.
    With one, its provider is sampled every ``config.scan_step`` days and
    each bracket refined by bisection, which works for any provider.
    """
    start, end = require_range(start, end)
    target = norm360(target_deg)
    if engine is None:
        return _crossings_by_series(start, end, target, config)
    return _crossings_by_scan(engine, start, end, target, config)


def principal_terms_between(
    start: float,
    end: float,
    *,
    degrees: Iterable[float] = ZHONGQI_DEGS,
    engine: Optional["AstronomyEngine"] = None,
    config: SearchConfig = DEFAULT_SEARCH,
) -> List[Tuple[float, float]]:
    """
    All crossings of ``degrees`` in [start, end) as (deg, moment), by moment.
    """
    start, end = require_range(start, end)

    out: List[Tuple[float, float]] = []
    for deg in degrees:
        for t in solar_longitude_crossings(start, end, target_deg=float(deg), engine=engine, config=config):
            out.append((float(deg), t))

    out.sort(key=lambda x: x[1])
    return out


def solar_terms_between(
    start: float,
    end: float,
    *,
    engine: Optional["AstronomyEngine"] = None,
    config: SearchConfig = DEFAULT_SEARCH,
) -> List[Tuple[float, float]]:
    """
    The 24 solar terms (0, 15, ..., 345 deg) crossed in [start, end).
    """
    return principal_terms_between(
        start,
        end,
        degrees=SOLAR_TERM_DEGS,
        engine=engine,
        config=config,
    )
