# src/calastro/api/public.py
from __future__ import annotations

import logging
import time
from datetime import date, datetime
from functools import lru_cache
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from calastro.core.config import EngineConfig
from calastro.core.ephemeris import ephemeris_correction, julian_centuries
from calastro.core.gregorian import fixed_from_gregorian
from calastro.core.location import Location
from calastro.core.lunar import lunar_distance, lunar_latitude, lunar_longitude
from calastro.core.newmoon import lunar_phase
from calastro.core.results import MaybeMoment, is_event
from calastro.core.riseset import dawn, dusk, moonrise, moonset, sunrise, sunset
from calastro.core.solar import equation_of_time, solar_longitude
from calastro.core.timeutil import datetime_from_moment, moment_from_datetime
from calastro.core.visibility import moonlag, visible_crescent
from calastro.features.config import PLACES, place_from_name
from calastro.features.events import (
    AstroEvent,
    moon_phase_events_between,
    season_events_for_year,
    solar_term_events_between,
)

router = APIRouter(prefix="/api/v1", tags=["public"])

log = logging.getLogger("calastro.api.public")

DEFAULT_PLACE = "greenwich"
CIVIL_TWILIGHT = 6.0


# ============================================================
# Response Models
# ============================================================
class PositionsResponse(BaseModel):
    at: datetime
    moment: float = Field(description="RD moment, universal time")
    julian_centuries: float
    ephemeris_correction_seconds: float
    equation_of_time_minutes: float
    solar_longitude: float
    lunar_longitude: float
    lunar_latitude: float
    lunar_distance_m: float
    lunar_phase: float


class PlaceInfo(BaseModel):
    name: Optional[str] = None
    latitude: float
    longitude: float
    elevation: float
    utc_offset_hours: float


class SunTimes(BaseModel):
    dawn: Optional[datetime] = Field(default=None, description="civil dawn (6 deg)")
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    dusk: Optional[datetime] = Field(default=None, description="civil dusk (6 deg)")


class MoonTimes(BaseModel):
    moonrise: Optional[datetime] = None
    moonset: Optional[datetime] = None
    moonlag_minutes: Optional[float] = None


class DayResponse(BaseModel):
    day: date
    place: PlaceInfo
    sun: SunTimes
    moon: MoonTimes
    crescent_visible: Dict[str, bool] = Field(default_factory=dict)


class EventItem(BaseModel):
    kind: str
    name: str
    deg: int
    utc: datetime
    local: datetime


class YearResponse(BaseModel):
    year: int
    place: PlaceInfo
    seasons: List[EventItem]
    solar_terms: List[EventItem]
    moon_phases: List[EventItem]


# =========================================================
# Helpers
# =========================================================
@lru_cache(maxsize=1)
def _config() -> EngineConfig:
    return EngineConfig.from_env()


def _parse_iso_date(s: str) -> date:
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid date format: {s} (expected YYYY-MM-DD)") from e


def _parse_iso_datetime(s: str) -> datetime:
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid datetime: {s} (expected ISO 8601)") from e
    if dt.tzinfo is None:
        raise HTTPException(status_code=422, detail=f"datetime must carry a UTC offset: {s}")
    return dt


def _check_tz(tz: Optional[str]) -> None:
    if not tz:
        return
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Unknown timezone: {tz}") from e


def _resolve_place(
    place: Optional[str],
    lat: Optional[float],
    lon: Optional[float],
    elevation: float,
    utc_offset: float,
) -> tuple[Optional[str], Location]:
    if lat is None and lon is None:
        name = place or DEFAULT_PLACE
        try:
            return name, place_from_name(name)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
    if place:
        raise HTTPException(status_code=422, detail="give either place or lat/lon, not both")
    if lat is None or lon is None:
        raise HTTPException(status_code=422, detail="lat and lon must be provided together")
    try:
        return None, Location(float(lat), float(lon), float(elevation), float(utc_offset) / 24)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _place_info(name: Optional[str], location: Location) -> PlaceInfo:
    return PlaceInfo(
        name=name,
        latitude=location.latitude,
        longitude=location.longitude,
        elevation=location.elevation,
        utc_offset_hours=location.zone * 24,
    )


def _standard_dt(tee: MaybeMoment, location: Location) -> Optional[datetime]:
    if not is_event(tee):
        return None
    return datetime_from_moment(tee, offset=location.zone)


def _event_item(e: AstroEvent) -> EventItem:
    return EventItem(kind=e.kind, name=e.name, deg=e.deg, utc=e.utc, local=e.local)


# =========================================================
# Public JSON API (function-style, HTTP-ready)
# =========================================================
def get_positions(at: datetime) -> PositionsResponse:
    tee = moment_from_datetime(at)
    return PositionsResponse(
        at=at,
        moment=tee,
        julian_centuries=julian_centuries(tee),
        ephemeris_correction_seconds=ephemeris_correction(tee) * 86400,
        equation_of_time_minutes=equation_of_time(tee) * 1440,
        solar_longitude=solar_longitude(tee),
        lunar_longitude=lunar_longitude(tee),
        lunar_latitude=lunar_latitude(tee),
        lunar_distance_m=lunar_distance(tee),
        lunar_phase=lunar_phase(tee),
    )


def get_day(
    d: date,
    location: Location,
    *,
    place_name: Optional[str] = None,
    criterion: Optional[str] = None,
) -> DayResponse:
    cfg = _config()
    fixed = fixed_from_gregorian(d.year, d.month, d.day)
    search = cfg.search

    sun = SunTimes(
        dawn=_standard_dt(dawn(fixed, location, CIVIL_TWILIGHT, config=search), location),
        sunrise=_standard_dt(sunrise(fixed, location, config=search), location),
        sunset=_standard_dt(sunset(fixed, location, config=search), location),
        dusk=_standard_dt(dusk(fixed, location, CIVIL_TWILIGHT, config=search), location),
    )

    lag = moonlag(fixed, location)
    moon = MoonTimes(
        moonrise=_standard_dt(moonrise(fixed, location, config=search), location),
        moonset=_standard_dt(moonset(fixed, location, config=search), location),
        moonlag_minutes=lag * 1440 if is_event(lag) else None,
    )

    name = criterion or cfg.visibility.criterion
    crescent = {name: visible_crescent(fixed, location, criterion=name, config=cfg.visibility)}

    return DayResponse(
        day=d,
        place=_place_info(place_name, location),
        sun=sun,
        moon=moon,
        crescent_visible=crescent,
    )


def get_year(year: int, location: Location, *, place_name: Optional[str] = None, tz: Optional[str] = None) -> YearResponse:
    search = _config().search
    start = float(fixed_from_gregorian(year, 1, 1))
    end = float(fixed_from_gregorian(year + 1, 1, 1))
    seasons = season_events_for_year(year, location=location, tz=tz, config=search)
    terms = solar_term_events_between(start, end, location=location, tz=tz, config=search)
    phases = moon_phase_events_between(start, end, location=location, tz=tz, config=search)
    return YearResponse(
        year=year,
        place=_place_info(place_name, location),
        seasons=[_event_item(e) for e in seasons],
        solar_terms=[_event_item(e) for e in terms],
        moon_phases=[_event_item(e) for e in phases],
    )


# =========================================================
# Endpoints
# =========================================================
@router.get("/places")
def get_places_endpoint() -> Dict[str, PlaceInfo]:
    return {name: _place_info(name, loc) for name, loc in PLACES.items()}


@router.get("/positions", response_model=PositionsResponse)
def get_positions_endpoint(
    at: str = Query(..., description="ISO 8601 datetime with offset"),
) -> PositionsResponse:
    dt = _parse_iso_datetime(at)
    try:
        return get_positions(dt)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.get("/day", response_model=DayResponse)
def get_day_endpoint(
    date_str: str = Query(..., alias="date", description="YYYY-MM-DD"),
    place: Optional[str] = Query(None, description=f"named site, default {DEFAULT_PLACE}"),
    lat: Optional[float] = Query(None, description="observer latitude (deg)"),
    lon: Optional[float] = Query(None, description="observer longitude (deg, east positive)"),
    elevation: float = Query(0.0, description="meters"),
    utc_offset: float = Query(0.0, description="standard time offset (hours)"),
    criterion: Optional[str] = Query(None, description="shaukat | yallop | saudi | babylonian"),
    timing: bool = Query(False, description="log timing"),
) -> DayResponse:
    d = _parse_iso_date(date_str)
    name, location = _resolve_place(place, lat, lon, elevation, utc_offset)

    t0 = time.perf_counter()
    try:
        out = get_day(d, location, place_name=name, criterion=criterion)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception:
        log.exception("day calculation failed: date=%s place=%s", d, name or location)
        raise
    if timing:
        log.warning("timing /day date=%s place=%s total=%.3fs", d, name or location, time.perf_counter() - t0)
    return out


@router.get("/year", response_model=YearResponse)
def get_year_endpoint(
    year: int = Query(..., ge=2, le=9998),
    place: Optional[str] = Query(None, description=f"named site, default {DEFAULT_PLACE}"),
    lat: Optional[float] = Query(None),
    lon: Optional[float] = Query(None),
    elevation: float = Query(0.0),
    utc_offset: float = Query(0.0),
    tz: Optional[str] = Query(None, description="IANA zone for local readings"),
) -> YearResponse:
    _check_tz(tz)
    name, location = _resolve_place(place, lat, lon, elevation, utc_offset)
    try:
        return get_year(year, location, place_name=name, tz=tz)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception:
        log.exception("year calculation failed: year=%s place=%s", year, name or location)
        raise
