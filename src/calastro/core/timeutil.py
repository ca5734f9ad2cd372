# src/calastro/core/timeutil.py
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Tuple

from .angles import mod

HOURS_PER_DAY = 24
MINUTES_PER_DAY = 24 * 60
SECONDS_PER_DAY = 24 * 60 * 60

# RD moment of Julian Day 0 and of the Unix epoch.
JD_EPOCH = -1721424.5
UNIX_EPOCH = 719163

_RD_ORIGIN = datetime(1, 1, 1, tzinfo=timezone.utc)


def hours(x: float) -> float:
    """x hours as a fraction of a day."""
    return x / HOURS_PER_DAY


def minutes(x: float) -> float:
    """x minutes as a fraction of a day."""
    return x / MINUTES_PER_DAY


def seconds(x: float) -> float:
    """x seconds as a fraction of a day."""
    return x / SECONDS_PER_DAY


def fixed_from_moment(tee: float) -> int:
    return math.floor(tee)


def time_from_moment(tee: float) -> float:
    return mod(tee, 1)


def time_from_clock(h: float, m: float, s: float) -> float:
    return (h + (m + s / 60) / 60) / 24


def clock_from_moment(tee: float) -> Tuple[int, int, int]:
    """(hour, minute, second) of the moment; seconds truncated."""
    time = time_from_moment(tee)
    hour = math.floor(time * 24)
    minute = math.floor(mod(time * 1440, 60))
    second = int(mod(time * 86400, 60))
    return hour, minute, second


def moment_from_jd(jd: float) -> float:
    return jd + JD_EPOCH


def jd_from_moment(tee: float) -> float:
    return tee - JD_EPOCH


def moment_from_unix(s: float) -> float:
    return UNIX_EPOCH + s / SECONDS_PER_DAY


def require_utc(dt: datetime, name: str = "dt") -> datetime:
    """
    Ensure a datetime is timezone-aware and return it converted to UTC.

    Raises
    ------
    ValueError
        If dt is naive or its tzinfo cannot produce an offset.
    """
    if dt.tzinfo is None:
        raise ValueError(f"{name} must be timezone-aware (got naive datetime)")
    if dt.utcoffset() is None:
        raise ValueError(f"{name} has invalid tzinfo (utcoffset is None): {dt.tzinfo!r}")
    return dt.astimezone(timezone.utc)


def moment_from_datetime(dt: datetime) -> float:
    """
    Universal-time moment (RD) of a timezone-aware datetime.

    RD 1 is 0001-01-01 (proleptic Gregorian), so this is the datetime's
    ordinal plus the UTC time of day.
    """
    u = require_utc(dt, "dt")
    day_seconds = u.hour * 3600 + u.minute * 60 + u.second + u.microsecond / 1_000_000
    return u.toordinal() + day_seconds / SECONDS_PER_DAY


def datetime_from_moment(tee: float, *, offset: float = 0.0) -> datetime:
    """
    Datetime of a moment whose scale is ``offset`` days ahead of UT.

    Pass ``offset=location.zone`` for a standard-time moment; the result
    carries a fixed-offset tzinfo. Rounded to the nearest second. Only years
    1..9999 are representable.
    """
    if not math.isfinite(tee):
        raise ValueError(f"moment must be finite, got {tee!r}")
    tz = timezone(timedelta(seconds=round(offset * SECONDS_PER_DAY)))
    secs = round((tee - 1) * SECONDS_PER_DAY)
    return (_RD_ORIGIN + timedelta(seconds=secs)).replace(tzinfo=tz)


def require_range(start: float, end: float) -> tuple[float, float]:
    """
    Validate [start, end) as finite moments with end > start.
    """
    if not (math.isfinite(start) and math.isfinite(end)):
        raise ValueError("start and end must be finite moments")
    if end <= start:
        raise ValueError("end must be greater than start")
    return start, end
