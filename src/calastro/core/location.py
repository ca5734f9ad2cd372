# src/calastro/core/location.py
from __future__ import annotations

import math
from dataclasses import dataclass

from .angles import (
    arctan_degrees,
    cos_degrees,
    degrees_minutes_seconds,
    sin_degrees,
    tan_degrees,
)
from .gregorian import gregorian_year_from_fixed
from .timeutil import hours


@dataclass(frozen=True)
class Location:
    """
    Observer position.

    latitude:  degrees, north positive, [-90, 90]
    longitude: degrees, east positive
    elevation: meters above sea level
    zone:      offset of standard time from UT, as a fraction of a day
    """
    latitude: float
    longitude: float
    elevation: float = 0.0
    zone: float = 0.0

    def __post_init__(self) -> None:
        for name in ("latitude", "longitude", "elevation", "zone"):
            v = getattr(self, name)
            if not isinstance(v, (int, float)) or not math.isfinite(v):
                raise ValueError(f"{name} must be a finite number (got {v!r})")
        if not (-90.0 <= self.latitude <= 90.0):
            raise ValueError(f"latitude out of range [-90, 90]: {self.latitude}")
        if not (-180.0 <= self.longitude < 360.0):
            raise ValueError(f"longitude out of range [-180, 360): {self.longitude}")
        if self.elevation < -500.0:
            raise ValueError(f"elevation below -500 m: {self.elevation}")
        if not (-0.5 <= self.zone <= 0.5):
            raise ValueError(f"zone must be within half a day of UT: {self.zone}")


URBANA = Location(40.1, -88.2, 225, hours(-6))
GREENWICH = Location(51.4777815, 0, 46.9, hours(0))
MECCA = Location(6427 / 300, 11947 / 300, 298, hours(3))
JERUSALEM = Location(31.78, 35.24, 740, hours(2))
ACRE = Location(32.94, 35.09, 22, hours(2))
TEHRAN = Location(35.68, 51.42, 1100, hours(3.5))
BAHAI_TEHRAN = Location(35.696111, 51.423056, 0, hours(3.5))
UJJAIN = Location(
    degrees_minutes_seconds(23, 9, 0),
    degrees_minutes_seconds(75, 46, 6),
    0,
    hours(5 + 461 / 9000),
)
BABYLON = Location(32.4794, 44.4328, 26, 0.145833)
PADUA = Location(
    degrees_minutes_seconds(45, 24, 28),
    degrees_minutes_seconds(11, 53, 9),
    18,
    hours(1),
)
PARIS = Location(
    degrees_minutes_seconds(48, 50, 11),
    degrees_minutes_seconds(2, 20, 15),
    27,
    hours(1),
)
# site used for observational Islamic months
CAIRO = Location(30.1, 31.3, 200, hours(2))
MT_GERIZIM = Location(32.1994, 35.2728, 881, hours(2))
CFS_ALERT = Location(82.5, 62.316667, 0, -0.208333)


def chinese_location(tee: float) -> Location:
    """Beijing; standard time was local mean time of 116°25' E before 1929."""
    year = gregorian_year_from_fixed(math.floor(tee))
    zone = hours(1397 / 180) if year < 1929 else hours(8)
    return Location(
        degrees_minutes_seconds(39, 55, 0),
        degrees_minutes_seconds(116, 25, 0),
        43.5,
        zone,
    )


def zone_from_longitude(longitude: float) -> float:
    return longitude / 360


def universal_from_local(t_local: float, location: Location) -> float:
    return t_local - zone_from_longitude(location.longitude)


def local_from_universal(t_universal: float, location: Location) -> float:
    return t_universal + zone_from_longitude(location.longitude)


def standard_from_universal(t_universal: float, location: Location) -> float:
    return t_universal + location.zone


def universal_from_standard(t_standard: float, location: Location) -> float:
    return t_standard - location.zone


def standard_from_local(t_local: float, location: Location) -> float:
    return standard_from_universal(universal_from_local(t_local, location), location)


def local_from_standard(t_standard: float, location: Location) -> float:
    return local_from_universal(universal_from_standard(t_standard, location), location)


def direction(location: Location, focus: Location) -> float:
    """
    Bearing (clockwise from north, degrees) to face ``focus`` from ``location``.
    """
    phi, psi = location.latitude, location.longitude
    phi_f, psi_f = focus.latitude, focus.longitude
    y = sin_degrees(psi_f - psi)
    x = cos_degrees(phi) * tan_degrees(phi_f) - sin_degrees(phi) * cos_degrees(psi - psi_f)
    if (x == 0 and y == 0) or phi_f == 90:
        return 0.0
    if phi_f == -90:
        return 180.0
    return arctan_degrees(y, x)
