# src/calastro/core/solar.py
from __future__ import annotations

import math

from .angles import (
    arcsin_degrees,
    arcseconds,
    arctan_degrees,
    cos_degrees,
    degrees_minutes_seconds,
    mod,
    mod3,
    poly,
    sigma,
    sign,
    sin_degrees,
    tan_degrees,
)
from .ephemeris import julian_centuries, sidereal_from_moment
from .location import Location
from .results import NO_EVENT, MaybeAngle
from .timeutil import hours

MEAN_TROPICAL_YEAR = 365.242189
MEAN_SIDEREAL_YEAR = 365.25636

SPRING = 0.0
SUMMER = 90.0
AUTUMN = 180.0
WINTER = 270.0

# Bretagnon & Simon periodic terms: x * sin(y + z * c)
_SOLAR_X = (
    403406, 195207, 119433, 112392, 3891, 2819, 1721,
    660, 350, 334, 314, 268, 242, 234, 158, 132, 129, 114,
    99, 93, 86, 78, 72, 68, 64, 46, 38, 37, 32, 29, 28, 27, 27,
    25, 24, 21, 21, 20, 18, 17, 14, 13, 13, 13, 12, 10, 10, 10,
    10,
)
_SOLAR_Y = (
    270.54861, 340.19128, 63.91854, 331.26220,
    317.843, 86.631, 240.052, 310.26, 247.23,
    260.87, 297.82, 343.14, 166.79, 81.53,
    3.50, 132.75, 182.95, 162.03, 29.8,
    266.4, 249.2, 157.6, 257.8, 185.1, 69.9,
    8.0, 197.1, 250.4, 65.3, 162.7, 341.5,
    291.6, 98.5, 146.7, 110.0, 5.2, 342.6,
    230.9, 256.1, 45.3, 242.9, 115.2, 151.8,
    285.3, 53.3, 126.6, 205.7, 85.9,
    146.1,
)
_SOLAR_Z = (
    0.9287892, 35999.1376958, 35999.4089666,
    35998.7287385, 71998.20261, 71998.4403,
    36000.35726, 71997.4812, 32964.4678,
    -19.4410, 445267.1117, 45036.8840, 3.1008,
    22518.4434, -19.9739, 65928.9345,
    9038.0293, 3034.7684, 33718.148, 3034.448,
    -2280.773, 29929.992, 31556.493, 149.588,
    9037.750, 107997.405, -4444.176, 151.771,
    67555.316, 31556.080, -4561.540,
    107996.706, 1221.655, 62894.167,
    31437.369, 14578.298, -31931.757,
    34777.243, 1221.999, 62894.511,
    -4442.039, 107997.909, 119.066, 16859.071,
    -4.578, 26895.292, -39.127, 12297.536,
    90073.778,
)

_SIDEREAL_START = 336.13605101930455


def obliquity(tee: float) -> float:
    """Mean obliquity of the ecliptic (degrees) at moment ``tee``."""
    c = julian_centuries(tee)
    return degrees_minutes_seconds(23, 26, 21.448) + poly(
        c,
        (
            0,
            -degrees_minutes_seconds(0, 0, 46.8150),
            -degrees_minutes_seconds(0, 0, 0.00059),
            degrees_minutes_seconds(0, 0, 0.001813),
        ),
    )


def declination(tee: float, beta: float, lam: float) -> float:
    """
    Declination (degrees, [0, 360)) of ecliptic latitude ``beta`` and
    longitude ``lam`` at moment ``tee``. Southern values come back as
    360 - |delta|; the trigonometry below does not care.
    """
    eps = obliquity(tee)
    return arcsin_degrees(
        sin_degrees(beta) * cos_degrees(eps)
        + cos_degrees(beta) * sin_degrees(eps) * sin_degrees(lam)
    )


def right_ascension(tee: float, beta: float, lam: float) -> MaybeAngle:
    eps = obliquity(tee)
    return arctan_degrees(
        sin_degrees(lam) * cos_degrees(eps) - tan_degrees(beta) * sin_degrees(eps),
        cos_degrees(lam),
    )


def equation_of_time(tee: float) -> float:
    """
    Apparent minus mean solar time (fraction of a day) at moment ``tee``.

    Meeus' approximation; the magnitude is capped at 12 hours.
    """
    c = julian_centuries(tee)
    lam = poly(c, (280.46645, 36000.76983, 0.0003032))
    anomaly = poly(c, (357.52910, 35999.05030, -0.0001559, -0.00000048))
    eccentricity = poly(c, (0.016708617, -0.000042037, -0.0000001236))
    eps = obliquity(tee)
    y = tan_degrees(eps / 2) ** 2
    equation = (
        y * sin_degrees(2 * lam)
        - 2 * eccentricity * sin_degrees(anomaly)
        + 4 * eccentricity * y * sin_degrees(anomaly) * cos_degrees(2 * lam)
        - 0.5 * y * y * sin_degrees(4 * lam)
        - 1.25 * eccentricity * eccentricity * sin_degrees(2 * anomaly)
    ) / (2 * math.pi)
    return sign(equation) * min(abs(equation), hours(12))


def nutation(tee: float) -> float:
    c = julian_centuries(tee)
    a = poly(c, (124.90, -1934.134, 0.002063))
    b = poly(c, (201.11, 72001.5377, 0.00057))
    return -0.004778 * sin_degrees(a) - 0.0003667 * sin_degrees(b)


def aberration(tee: float) -> float:
    c = julian_centuries(tee)
    return 0.0000974 * cos_degrees(177.63 + 35999.01848 * c) - 0.005575


def solar_longitude(tee: float) -> float:
    """
    Apparent geocentric longitude of the sun (degrees, [0, 360)) at
    universal moment ``tee``.
    """
    c = julian_centuries(tee)
    periods = sigma(
        (_SOLAR_X, _SOLAR_Y, _SOLAR_Z),
        lambda x, y, z: x * sin_degrees(y + z * c),
    )
    lam = 282.7771834 + 36000.76953744 * c + 0.000005729577951308232 * periods
    return mod(lam + aberration(tee) + nutation(tee), 360)


def precession(tee: float) -> float:
    """Precession (degrees) since J2000, for a body at longitude and latitude 0."""
    c = julian_centuries(tee)
    eta = mod(poly(c, (0, arcseconds(47.0029), arcseconds(-0.03302), arcseconds(0.000060))), 360)
    cap_p = mod(poly(c, (174.876384, arcseconds(-869.8089), arcseconds(0.03536))), 360)
    p = mod(poly(c, (0, arcseconds(5029.0966), arcseconds(1.11113), arcseconds(0.000006))), 360)
    arg = arctan_degrees(cos_degrees(eta) * sin_degrees(cap_p), cos_degrees(cap_p))
    if arg is NO_EVENT:
        arg = 0.0
    return mod(p + cap_p - arg, 360)


def sidereal_solar_longitude(tee: float) -> float:
    return mod(solar_longitude(tee) - precession(tee) + _SIDEREAL_START, 360)


def solar_altitude(tee: float, location: Location) -> float:
    """
    Geocentric altitude of the sun (degrees, [-180, 180)), without
    parallax or refraction.
    """
    lam = solar_longitude(tee)
    alpha = right_ascension(tee, 0, lam)
    delta = declination(tee, 0, lam)
    hour_angle = mod(sidereal_from_moment(tee) + location.longitude - alpha, 360)
    altitude = arcsin_degrees(
        sin_degrees(location.latitude) * sin_degrees(delta)
        + cos_degrees(location.latitude) * cos_degrees(delta) * cos_degrees(hour_angle)
    )
    return mod3(altitude, -180, 180)
