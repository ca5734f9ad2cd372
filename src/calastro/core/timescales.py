# src/calastro/core/timescales.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .ephemeris import (
    dynamical_from_universal,
    sidereal_from_moment,
    universal_from_dynamical,
)
from .location import (
    Location,
    local_from_universal,
    standard_from_universal,
    universal_from_local,
    universal_from_standard,
)
from .results import TimeScaleError
from .solar import equation_of_time
from .timeutil import hours

__all__ = [
    "TimeScale",
    "ScaledMoment",
    "require_scale",
    "apparent_from_local",
    "local_from_apparent",
    "apparent_from_universal",
    "universal_from_apparent",
    "midnight",
    "midday",
    "sidereal_from_moment",
]


# fixed-point passes for the inverse equation of time
_APPARENT_PASSES = 3


def apparent_from_local(t_local: float, location: Location) -> float:
    """Sundial time from local mean time."""
    # equation of time is evaluated at the universal instant, computed first
    t_universal = universal_from_local(t_local, location)
    return t_local + equation_of_time(t_universal)


def local_from_apparent(t_apparent: float, location: Location) -> float:
    """
    Local mean time from sundial time.

    Starts from the equation of time at the universal reading of
    ``t_apparent`` itself, then re-evaluates it at the refined local time;
    each pass shrinks the error by the drift rate of the equation of time.
    """
    t_local = t_apparent
    for _ in range(_APPARENT_PASSES):
        t_local = t_apparent - equation_of_time(universal_from_local(t_local, location))
    return t_local


def apparent_from_universal(t_universal: float, location: Location) -> float:
    return apparent_from_local(local_from_universal(t_universal, location), location)


def universal_from_apparent(t_apparent: float, location: Location) -> float:
    return universal_from_local(local_from_apparent(t_apparent, location), location)


def midnight(fixed: int, location: Location) -> float:
    """Universal time of true (apparent) midnight starting ``fixed`` at ``location``."""
    return universal_from_apparent(fixed, location)


def midday(fixed: int, location: Location) -> float:
    """Universal time of true (apparent) noon of ``fixed`` at ``location``."""
    return universal_from_apparent(fixed + hours(12), location)


class TimeScale(str, Enum):
    UNIVERSAL = "universal"
    STANDARD = "standard"
    LOCAL = "local"
    APPARENT = "apparent"
    DYNAMICAL = "dynamical"


_LOCATION_SCALES = {TimeScale.STANDARD, TimeScale.LOCAL, TimeScale.APPARENT}

_TO_UNIVERSAL = {
    TimeScale.UNIVERSAL: lambda t, loc: t,
    TimeScale.STANDARD: universal_from_standard,
    TimeScale.LOCAL: universal_from_local,
    TimeScale.APPARENT: universal_from_apparent,
    TimeScale.DYNAMICAL: lambda t, loc: universal_from_dynamical(t),
}

_FROM_UNIVERSAL = {
    TimeScale.UNIVERSAL: lambda t, loc: t,
    TimeScale.STANDARD: standard_from_universal,
    TimeScale.LOCAL: local_from_universal,
    TimeScale.APPARENT: apparent_from_universal,
    TimeScale.DYNAMICAL: lambda t, loc: dynamical_from_universal(t),
}


@dataclass(frozen=True)
class ScaledMoment:
    """
    A moment tagged with the time scale it is expressed in.

    Standard, local and apparent readings are only meaningful together with
    the location they were produced for.
    """
    value: float
    scale: TimeScale = TimeScale.UNIVERSAL
    location: Optional[Location] = None

    def __post_init__(self) -> None:
        if self.scale in _LOCATION_SCALES and self.location is None:
            raise TimeScaleError(f"{self.scale.value} moment requires a location")

    @classmethod
    def universal(cls, value: float) -> "ScaledMoment":
        return cls(value, TimeScale.UNIVERSAL)

    def to(self, scale: TimeScale, location: Optional[Location] = None) -> "ScaledMoment":
        """Convert through universal time; ``location`` defaults to our own."""
        scale = TimeScale(scale)
        if scale == self.scale and (location is None or location == self.location):
            return self
        t_universal = _TO_UNIVERSAL[self.scale](self.value, self.location)
        target_loc = location if location is not None else self.location
        if scale in _LOCATION_SCALES and target_loc is None:
            raise TimeScaleError(f"conversion to {scale.value} requires a location")
        value = _FROM_UNIVERSAL[scale](t_universal, target_loc)
        return ScaledMoment(value, scale, target_loc if scale in _LOCATION_SCALES else None)

    def as_universal(self) -> float:
        return self.to(TimeScale.UNIVERSAL).value


def require_scale(moment: ScaledMoment, scale: TimeScale, name: str = "moment") -> float:
    """
    Return the raw value of ``moment`` if it is expressed in ``scale``.

    Raises
    ------
    TimeScaleError
        If the moment carries a different scale.
    """
    if moment.scale != scale:
        raise TimeScaleError(
            f"{name} must be a {TimeScale(scale).value} moment (got {moment.scale.value})"
        )
    return moment.value
