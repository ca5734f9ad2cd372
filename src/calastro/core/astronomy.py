# src/calastro/core/astronomy.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Protocol, Sequence, Union, runtime_checkable

from .angles import angdiff180, norm360
from .lunar import lunar_latitude, lunar_longitude
from .newmoon import lunar_phase
from .solar import solar_longitude
from .timeutil import moment_from_datetime

MomentLike = Union[float, int, datetime]


@runtime_checkable
class AstroProvider(Protocol):
    """Apparent geocentric ecliptic longitudes (degrees) at a universal moment."""

    def solar_longitude(self, tee: float) -> float: ...
    def lunar_longitude(self, tee: float) -> float: ...


@dataclass(frozen=True)
class CalendricalProvider:
    """
    The built-in series: Bretagnon-Simon for the sun, Meeus for the moon,
    with the piecewise ephemeris correction. Needs no data files.
    """

    def solar_longitude(self, tee: float) -> float:
        return solar_longitude(tee)

    def lunar_longitude(self, tee: float) -> float:
        return lunar_longitude(tee)

    def lunar_latitude(self, tee: float) -> float:
        return lunar_latitude(tee)

    def lunar_phase(self, tee: float) -> float:
        return lunar_phase(tee)


def _as_moment(t: MomentLike) -> float:
    if isinstance(t, datetime):
        return moment_from_datetime(t)
    return float(t)


@dataclass(frozen=True)
class AstronomyEngine:
    provider: AstroProvider = CalendricalProvider()

    def sun_lon(self, t: MomentLike) -> float:
        """Apparent solar longitude (degrees) at a universal moment or aware datetime."""
        return norm360(self.provider.solar_longitude(_as_moment(t)))

    def moon_lon(self, t: MomentLike) -> float:
        """Apparent lunar longitude (degrees) at a universal moment or aware datetime."""
        return norm360(self.provider.lunar_longitude(_as_moment(t)))

    def sun_lon_many(self, ts: Sequence[MomentLike]) -> List[float]:
        """
        Vectorized solar longitude if the provider supports it; otherwise a loop.
        """
        if not ts:
            return []
        xs = [_as_moment(t) for t in ts]
        f = getattr(self.provider, "solar_longitude_many", None)
        if callable(f):
            return [norm360(float(v)) for v in f(xs)]
        return [self.sun_lon(x) for x in xs]

    def moon_lon_many(self, ts: Sequence[MomentLike]) -> List[float]:
        if not ts:
            return []
        xs = [_as_moment(t) for t in ts]
        f = getattr(self.provider, "lunar_longitude_many", None)
        if callable(f):
            return [norm360(float(v)) for v in f(xs)]
        return [self.moon_lon(x) for x in xs]

    def elongation(self, t: MomentLike) -> float:
        """Moon minus sun longitude in [0, 360); 0 at new moon."""
        tee = _as_moment(t)
        return norm360(self.moon_lon(tee) - self.sun_lon(tee))

    def moon_sun_lon_diff(self, t: MomentLike) -> float:
        """Moon minus sun longitude mapped to [-180, 180). New moon is 0."""
        tee = _as_moment(t)
        return angdiff180(self.moon_lon(tee) - self.sun_lon(tee))
