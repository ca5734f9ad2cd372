# src/calastro/features/events.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from calastro.core.config import DEFAULT_SEARCH, SearchConfig
from calastro.core.gregorian import gregorian_new_year
from calastro.core.location import GREENWICH, Location, standard_from_universal
from calastro.core.newmoon import lunar_phases_between
from calastro.core.solarterms import principal_terms_between, solar_terms_between
from calastro.core.timeutil import datetime_from_moment, require_range
from calastro.features.config import SEASONS, phase_name, term_info_from_deg


@dataclass(frozen=True)
class AstroEvent:
    """
    A located event: universal moment plus its reading at ``location``.
    """
    kind: str           # "solar_term" | "season" | "moon_phase"
    name: str
    deg: int
    universal: float    # RD moment, UT
    standard: float     # RD moment, standard time of the location
    utc: datetime
    local: datetime
    local_date: str     # YYYY-MM-DD
    n: Optional[int] = None
    term_kind: Optional[str] = None


def _local_datetime(tee: float, location: Location, tz: Optional[str]) -> datetime:
    if tz:
        return datetime_from_moment(tee).astimezone(ZoneInfo(tz))
    return datetime_from_moment(standard_from_universal(tee, location), offset=location.zone)


def _event(
    kind: str,
    name: str,
    deg: float,
    tee: float,
    location: Location,
    tz: Optional[str],
    **extra,
) -> AstroEvent:
    local = _local_datetime(tee, location, tz)
    return AstroEvent(
        kind=kind,
        name=name,
        deg=int(round(deg)) % 360,
        universal=tee,
        standard=standard_from_universal(tee, location),
        utc=datetime_from_moment(tee),
        local=local,
        local_date=local.date().isoformat(),
        **extra,
    )


def solar_term_events_between(
    start: float,
    end: float,
    *,
    location: Location = GREENWICH,
    tz: Optional[str] = None,
    config: SearchConfig = DEFAULT_SEARCH,
) -> List[AstroEvent]:
    """
    The 24 solar terms in [start, end) (universal moments).

    Dates are read in ``tz`` (an IANA zone name) when given, otherwise in
    the standard time of ``location``.
    """
    start, end = require_range(start, end)
    out: List[AstroEvent] = []
    for deg, tee in solar_terms_between(start, end, config=config):
        info = term_info_from_deg(deg)
        out.append(
            _event("solar_term", info.name, info.deg, tee, location, tz, n=info.n, term_kind=info.kind)
        )
    return out


def season_events_for_year(
    year: int,
    *,
    location: Location = GREENWICH,
    tz: Optional[str] = None,
    config: SearchConfig = DEFAULT_SEARCH,
) -> List[AstroEvent]:
    """Equinoxes and solstices of Gregorian ``year`` (universal new year to new year)."""
    start = float(gregorian_new_year(year))
    end = float(gregorian_new_year(year + 1))
    terms = principal_terms_between(start, end, degrees=[float(d) for d in SEASONS], config=config)
    return [
        _event("season", SEASONS[int(deg)], deg, tee, location, tz)
        for deg, tee in terms
    ]


def moon_phase_events_between(
    start: float,
    end: float,
    *,
    location: Location = GREENWICH,
    tz: Optional[str] = None,
    phases: tuple[float, ...] = (0.0, 90.0, 180.0, 270.0),
    config: SearchConfig = DEFAULT_SEARCH,
) -> List[AstroEvent]:
    """
    Principal moon phases in [start, end), ascending.
    """
    start, end = require_range(start, end)
    out: List[AstroEvent] = []
    for phi in phases:
        name = phase_name(phi)
        for tee in lunar_phases_between(start, end, phi, config=config):
            out.append(_event("moon_phase", name, phi, tee, location, tz))
    out.sort(key=lambda e: e.universal)
    return out
