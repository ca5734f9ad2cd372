# src/calastro/core/lunar.py
from __future__ import annotations

import math

from .angles import (
    arcsin_degrees,
    cos_degrees,
    mod,
    mod3,
    poly,
    sigma,
    sin_degrees,
)
from .ephemeris import julian_centuries, sidereal_from_moment
from .location import Location
from .solar import declination, nutation, precession, right_ascension

# Mean distance of the moon (m) and equatorial radius of the earth (m).
MEAN_LUNAR_DISTANCE = 385000560
EARTH_RADIUS = 6378140

_SIDEREAL_START = 156.13605090692624

# Periodic terms in (D, M, M', F): v * E**|x| * trig(w*D + x*M + y*M' + z*F)
_LON_V = (
    6288774, 1274027, 658314, 213618, -185116, -114332,
    58793, 57066, 53322, 45758, -40923, -34720, -30383,
    15327, -12528, 10980, 10675, 10034, 8548, -7888,
    -6766, -5163, 4987, 4036, 3994, 3861, 3665, -2689,
    -2602, 2390, -2348, 2236, -2120, -2069, 2048, -1773,
    -1595, 1215, -1110, -892, -810, 759, -713, -700, 691,
    596, 549, 537, 520, -487, -399, -381, 351, -340, 330,
    327, -323, 299, 294,
)
_LON_W = (
    0, 2, 2, 0, 0, 0, 2, 2, 2, 2, 0, 1, 0, 2, 0, 0, 4, 0, 4, 2, 2, 1,
    1, 2, 2, 4, 2, 0, 2, 2, 1, 2, 0, 0, 2, 2, 2, 4, 0, 3, 2, 4, 0, 2,
    2, 2, 4, 0, 4, 1, 2, 0, 1, 3, 4, 2, 0, 1, 2,
)
_LON_X = (
    0, 0, 0, 0, 1, 0, 0, -1, 0, -1, 1, 0, 1, 0, 0, 0, 0, 0, 0, 1, 1,
    0, 1, -1, 0, 0, 0, 1, 0, -1, 0, -2, 1, 2, -2, 0, 0, -1, 0, 0, 1,
    -1, 2, 2, 1, -1, 0, 0, -1, 0, 1, 0, 1, 0, 0, -1, 2, 1, 0,
)
_LON_Y = (
    1, -1, 0, 2, 0, 0, -2, -1, 1, 0, -1, 0, 1, 0, 1, 1, -1, 3, -2,
    -1, 0, -1, 0, 1, 2, 0, -3, -2, -1, -2, 1, 0, 2, 0, -1, 1, 0,
    -1, 2, -1, 1, -2, -1, -1, -2, 0, 1, 4, 0, -2, 0, 2, 1, -2, -3,
    2, 1, -1, 3,
)
_LON_Z = (
    0, 0, 0, 0, 0, 2, 0, 0, 0, 0, 0, 0, 0, -2, 2, -2, 0, 0, 0, 0, 0,
    0, 0, 0, 0, 0, 0, 0, 2, 0, 0, 0, 0, 0, 0, -2, 2, 0, 2, 0, 0, 0, 0,
    0, 0, -2, 0, 0, 0, 0, -2, -2, 0, 0, 0, 0, 0, 0, 0,
)
_LAT_V = (
    5128122, 280602, 277693, 173237, 55413, 46271, 32573,
    17198, 9266, 8822, 8216, 4324, 4200, -3359, 2463, 2211,
    2065, -1870, 1828, -1794, -1749, -1565, -1491, -1475,
    -1410, -1344, -1335, 1107, 1021, 833, 777, 671, 607,
    596, 491, -451, 439, 422, 421, -366, -351, 331, 315,
    302, -283, -229, 223, 223, -220, -220, -185, 181,
    -177, 176, 166, -164, 132, -119, 115, 107,
)
_LAT_W = (
    0, 0, 0, 2, 2, 2, 2, 0, 2, 0, 2, 2, 2, 2, 2, 2, 2, 0, 4, 0, 0, 0,
    1, 0, 0, 0, 1, 0, 4, 4, 0, 4, 2, 2, 2, 2, 0, 2, 2, 2, 2, 4, 2, 2,
    0, 2, 1, 1, 0, 2, 1, 2, 0, 4, 4, 1, 4, 1, 4, 2,
)
_LAT_X = (
    0, 0, 0, 0, 0, 0, 0, 0, 0, 0, -1, 0, 0, 1, -1, -1, -1, 1, 0, 1,
    0, 1, 0, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, -1, 0, 0, 0, 0, 1, 1,
    0, -1, -2, 0, 1, 1, 1, 1, 1, 0, -1, 1, 0, -1, 0, 0, 0, -1, -2,
)
_LAT_Y = (
    0, 1, 1, 0, -1, -1, 0, 2, 1, 2, 0, -2, 1, 0, -1, 0, -1, -1, -1,
    0, 0, -1, 0, 1, 1, 0, 0, 3, 0, -1, 1, -2, 0, 2, 1, -2, 3, 2, -3,
    -1, 0, 0, 1, 0, 1, 1, 0, 0, -2, -1, 1, -2, 2, -2, -1, 1, 1, -1,
    0, 0,
)
_LAT_Z = (
    1, 1, -1, -1, 1, -1, 1, 1, -1, -1, -1, -1, 1, -1, 1, 1, -1, -1,
    -1, 1, 3, 1, 1, 1, -1, -1, -1, 1, -1, 1, -3, 1, -3, -1, -1, 1,
    -1, 1, -1, 1, 1, 1, 1, -1, 3, -1, -1, 1, -1, -1, 1, -1, 1, -1,
    -1, -1, -1, -1, -1, 1,
)
_DIST_V = (
    -20905355, -3699111, -2955968, -569925, 48888, -3149,
    246158, -152138, -170733, -204586, -129620, 108743,
    104755, 10321, 0, 79661, -34782, -23210, -21636, 24208,
    30824, -8379, -16675, -12831, -10445, -11650, 14403,
    -7003, 0, 10056, 6322, -9884, 5751, 0, -4950, 4130, 0,
    -3958, 0, 3258, 2616, -1897, -2117, 2354, 0, 0, -1423,
    -1117, -1571, -1739, 0, -4421, 0, 0, 0, 0, 1165, 0, 0,
    8752,
)
_DIST_W = (
    0, 2, 2, 0, 0, 0, 2, 2, 2, 2, 0, 1, 0, 2, 0, 0, 4, 0, 4, 2, 2, 1,
    1, 2, 2, 4, 2, 0, 2, 2, 1, 2, 0, 0, 2, 2, 2, 4, 0, 3, 2, 4, 0, 2,
    2, 2, 4, 0, 4, 1, 2, 0, 1, 3, 4, 2, 0, 1, 2, 2,
)
_DIST_X = (
    0, 0, 0, 0, 1, 0, 0, -1, 0, -1, 1, 0, 1, 0, 0, 0, 0, 0, 0, 1, 1,
    0, 1, -1, 0, 0, 0, 1, 0, -1, 0, -2, 1, 2, -2, 0, 0, -1, 0, 0, 1,
    -1, 2, 2, 1, -1, 0, 0, -1, 0, 1, 0, 1, 0, 0, -1, 2, 1, 0, 0,
)
_DIST_Y = (
    1, -1, 0, 2, 0, 0, -2, -1, 1, 0, -1, 0, 1, 0, 1, 1, -1, 3, -2,
    -1, 0, -1, 0, 1, 2, 0, -3, -2, -1, -2, 1, 0, 2, 0, -1, 1, 0,
    -1, 2, -1, 1, -2, -1, -1, -2, 0, 1, 4, 0, -2, 0, 2, 1, -2, -3,
    2, 1, -1, 3, -1,
)
_DIST_Z = (
    0, 0, 0, 0, 0, 2, 0, 0, 0, 0, 0, 0, 0, -2, 2, -2, 0, 0, 0, 0, 0,
    0, 0, 0, 0, 0, 0, 0, 2, 0, 0, 0, 0, 0, 0, -2, 2, 0, 2, 0, 0, 0, 0,
    0, 0, -2, 0, 0, 0, 0, -2, -2, 0, 0, 0, 0, 0, 0, 0, -2,
)



def mean_lunar_longitude(c: float) -> float:
    return mod(poly(c, (218.3164477, 481267.88123421, -0.0015786, 1 / 538841, -1 / 65194000)), 360)


def lunar_elongation(c: float) -> float:
    return mod(poly(c, (297.8501921, 445267.1114034, -0.0018819, 1 / 545868, -1 / 113065000)), 360)


def solar_anomaly(c: float) -> float:
    return mod(poly(c, (357.5291092, 35999.0502909, -0.0001536, 1 / 24490000)), 360)


def lunar_anomaly(c: float) -> float:
    return mod(poly(c, (134.9633964, 477198.8675055, 0.0087414, 1 / 69699, -1 / 14712000)), 360)


def moon_node(c: float) -> float:
    """Moon's argument of latitude (degrees, [0, 360))."""
    return mod(poly(c, (93.2720950, 483202.0175233, -0.0036539, -1 / 3526000, 1 / 863310000)), 360)


def _eccentricity_factor(c: float) -> float:
    return poly(c, (1, -0.002516, -0.0000074))


def _series(tables, trig, c: float) -> float:
    d = lunar_elongation(c)
    m = solar_anomaly(c)
    m_prime = lunar_anomaly(c)
    f = moon_node(c)
    e = _eccentricity_factor(c)
    return sigma(
        tables,
        lambda v, w, x, y, z: v * math.pow(e, abs(x)) * trig(w * d + x * m + y * m_prime + z * f),
    )


def lunar_longitude(tee: float) -> float:
    """
    Apparent geocentric longitude of the moon (degrees, [0, 360)) at
    universal moment ``tee``. Meeus, Astronomical Algorithms ch. 47.
    """
    c = julian_centuries(tee)
    l_prime = mean_lunar_longitude(c)
    f = moon_node(c)
    correction = _series((_LON_V, _LON_W, _LON_X, _LON_Y, _LON_Z), sin_degrees, c) / 1000000
    venus = sin_degrees(119.75 + c * 131.849) * 3958 / 1000000
    jupiter = sin_degrees(53.09 + c * 479264.29) * 318 / 1000000
    flat_earth = sin_degrees(l_prime - f) * 1962 / 1000000
    return mod(l_prime + correction + venus + jupiter + flat_earth + nutation(tee), 360)


def lunar_latitude(tee: float) -> float:
    """Geocentric latitude of the moon (degrees, small signed angle)."""
    c = julian_centuries(tee)
    l_prime = mean_lunar_longitude(c)
    m_prime = lunar_anomaly(c)
    f = moon_node(c)
    beta = _series((_LAT_V, _LAT_W, _LAT_X, _LAT_Y, _LAT_Z), sin_degrees, c) / 1000000
    venus = (
        sin_degrees(119.75 + c * 131.849 + f) + sin_degrees(119.75 + c * 131.849 - f)
    ) * (175 / 1000000)
    flat_earth = (
        127 * sin_degrees(l_prime - m_prime)
        - 115 * sin_degrees(l_prime + m_prime)
        - 2235 * sin_degrees(l_prime)
    ) / 1000000
    extra = sin_degrees(313.45 + c * 481266.484) * (382 / 1000000)
    return beta + venus + flat_earth + extra


def lunar_distance(tee: float) -> float:
    """Earth-moon distance in meters."""
    c = julian_centuries(tee)
    correction = _series((_DIST_V, _DIST_W, _DIST_X, _DIST_Y, _DIST_Z), cos_degrees, c)
    return MEAN_LUNAR_DISTANCE + correction


def lunar_node(fixed: float) -> float:
    """Angular distance of the ascending node from the equinox, [-90, 90)."""
    return mod3(moon_node(julian_centuries(fixed)), -90, 90)


def sidereal_lunar_longitude(tee: float) -> float:
    return mod(lunar_longitude(tee) - precession(tee) + _SIDEREAL_START, 360)


def lunar_altitude(tee: float, location: Location) -> float:
    """
    Geocentric altitude of the moon (degrees, [-180, 180)), ignoring
    parallax and refraction.
    """
    lam = lunar_longitude(tee)
    beta = lunar_latitude(tee)
    alpha = right_ascension(tee, beta, lam)
    delta = declination(tee, beta, lam)
    hour_angle = mod(sidereal_from_moment(tee) + location.longitude - alpha, 360)
    altitude = arcsin_degrees(
        sin_degrees(location.latitude) * sin_degrees(delta)
        + cos_degrees(location.latitude) * cos_degrees(delta) * cos_degrees(hour_angle)
    )
    return mod3(altitude, -180, 180)


def lunar_parallax(tee: float, location: Location) -> float:
    geo = lunar_altitude(tee, location)
    return arcsin_degrees(EARTH_RADIUS / lunar_distance(tee) * cos_degrees(geo))


def topocentric_lunar_altitude(tee: float, location: Location) -> float:
    return lunar_altitude(tee, location) - lunar_parallax(tee, location)


def lunar_diameter(tee: float) -> float:
    """Geocentric apparent diameter of the moon (degrees)."""
    return 1792367000 / (9 * lunar_distance(tee))


def lunar_semi_diameter(tee: float, location: Location) -> float:
    """Topocentric semi-diameter of the moon (degrees)."""
    h = lunar_altitude(tee, location)
    p = lunar_parallax(tee, location)
    return 0.27245 * p * (1 + sin_degrees(h) * sin_degrees(p))
