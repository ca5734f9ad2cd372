# src/calastro/core/providers/skyfield_provider.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional, Sequence, Tuple, Union

from skyfield import almanac
from skyfield.api import Loader, wgs84

from ..location import Location, standard_from_universal
from ..results import NO_EVENT, MaybeMoment
from ..timeutil import jd_from_moment, moment_from_jd

log = logging.getLogger(__name__)

EclipticFrameName = Literal["of_date", "J2000"]


def _frame_for(name: EclipticFrameName):
    from skyfield import framelib

    return {"J2000": framelib.ecliptic_J2000_frame}.get(name, framelib.ecliptic_frame)


def _data_dir() -> Path:
    # <repo>/data, next to src/
    return Path(__file__).resolve().parents[4] / "data"


def default_ephemeris_path() -> Path:
    """
    The BSP file to load. CALASTRO_EPHEMERIS_PATH wins, then
    CALASTRO_EPHEMERIS (absolute, or a name under data/), then data/de440s.bsp
    falling back to data/de421.bsp.
    """
    env_path = os.environ.get("CALASTRO_EPHEMERIS_PATH", "").strip()
    if env_path:
        return Path(env_path)
    env_name = os.environ.get("CALASTRO_EPHEMERIS", "").strip()
    if env_name:
        p = Path(env_name)
        return p if p.is_absolute() else _data_dir() / p

    data_dir = _data_dir()
    p440s = data_dir / "de440s.bsp"
    return p440s if p440s.exists() else data_dir / "de421.bsp"


@lru_cache(maxsize=32)
def _topos(lat: float, lon: float, elevation: float):
    return wgs84.latlon(latitude_degrees=lat, longitude_degrees=lon, elevation_m=elevation)


@dataclass(frozen=True)
class SkyfieldProvider:
    """
    JPL ephemeris positions through Skyfield, used to cross-check the
    built-in series. Moments are universal time (UT1).
    """

    ephemeris: Optional[Union[str, Path]] = None
    ecliptic_frame: EclipticFrameName = "of_date"

    def __post_init__(self) -> None:
        if self.ephemeris is None:
            path = default_ephemeris_path()
        else:
            p = Path(self.ephemeris)
            path = p if p.is_absolute() else _data_dir() / p
        if not path.exists():
            raise FileNotFoundError(
                f"Ephemeris not found: {path}\n"
                f"Place de440s.bsp or de421.bsp under {_data_dir()}, "
                "or set CALASTRO_EPHEMERIS_PATH."
            )

        loader = Loader(str(path.parent))
        eph = loader(path.name)
        ts = loader.timescale()

        state = {
            "_path": path,
            "_eph": eph,
            "_ts": ts,
            "_earth": eph["earth"],
            "_sun": eph["sun"],
            "_moon": eph["moon"],
            "_frame": _frame_for(self.ecliptic_frame),
        }
        for key, value in state.items():
            object.__setattr__(self, key, value)
        object.__setattr__(self, "_range", self._coverage_from_segments())

    def _coverage_from_segments(self) -> Tuple[float, float]:
        """Universal moments spanned by the SPK segments."""
        segs = getattr(getattr(self._eph, "spk", None), "segments", None) or []
        if not segs:
            return float("-inf"), float("inf")
        return moment_from_jd(min(s.start_jd for s in segs)), moment_from_jd(max(s.end_jd for s in segs))

    @property
    def coverage(self) -> Tuple[float, float]:
        return self._range

    def _check_range(self, tee: float) -> None:
        start, end = self._range
        if tee < start or tee > end:
            raise ValueError(
                "Requested moment is outside ephemeris coverage.\n"
                f"  requested: {tee}\n"
                f"  ephemeris: {self._path}\n"
                f"  coverage : {start} .. {end}"
            )

    def _t(self, tee: float):
        self._check_range(tee)
        return self._ts.ut1_jd(jd_from_moment(tee))

    def _t_many(self, tees: Sequence[float]):
        # fail fast on the extremes
        self._check_range(min(tees))
        self._check_range(max(tees))
        return self._ts.ut1_jd([jd_from_moment(x) for x in tees])

    def _lon(self, body, t):
        obs = self._earth.at(t).observe(body).apparent()
        _lat, lon, _dist = obs.frame_latlon(self._frame)
        return lon.degrees % 360.0

    def solar_longitude(self, tee: float) -> float:
        return float(self._lon(self._sun, self._t(tee)))

    def lunar_longitude(self, tee: float) -> float:
        return float(self._lon(self._moon, self._t(tee)))

    def solar_longitude_many(self, tees: Sequence[float]) -> List[float]:
        if not tees:
            return []
        return [float(x) for x in self._lon(self._sun, self._t_many(tees))]

    def lunar_longitude_many(self, tees: Sequence[float]) -> List[float]:
        if not tees:
            return []
        return [float(x) for x in self._lon(self._moon, self._t_many(tees))]

    def sunrise_sunset(self, fixed: int, location: Location) -> Tuple[MaybeMoment, MaybeMoment]:
        """
        Standard-time sunrise and sunset on the standard-time day ``fixed``,
        from Skyfield's almanac. NO_EVENT where the sun does not cross.
        """
        start = fixed - location.zone
        end = start + 1
        self._check_range(start)
        self._check_range(end)

        fn = almanac.sunrise_sunset(self._eph, _topos(location.latitude, location.longitude, location.elevation))
        times, events = almanac.find_discrete(self._t(start), self._t(end), fn)

        rise: MaybeMoment = NO_EVENT
        fall: MaybeMoment = NO_EVENT
        for t, ev in zip(times, events):
            tee = moment_from_jd(float(t.ut1))
            if int(ev) == 1 and rise is NO_EVENT:
                rise = standard_from_universal(tee, location)
            elif int(ev) == 0 and fall is NO_EVENT:
                fall = standard_from_universal(tee, location)

        if rise is NO_EVENT or fall is NO_EVENT:
            log.warning(
                "sunrise/sunset not found: fixed=%s lat=%.6f lon=%.6f",
                fixed,
                location.latitude,
                location.longitude,
            )
        return rise, fall

