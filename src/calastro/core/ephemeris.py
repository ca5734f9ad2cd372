# src/calastro/core/ephemeris.py
from __future__ import annotations

import math

from .angles import mod, poly
from .gregorian import gregorian_date_difference, gregorian_year_from_fixed

# Noon of 2000-01-01 (gregorian_new_year(2000) + 12h).
J2000 = 730120.5

_SECONDS = 86400

_C2006 = (62.92, 0.32217, 0.005589)
_C1987 = (63.86, 0.3345, -0.060374, 0.0017275, 0.000651814, 0.00002373599)
_C1900 = (-0.00002, 0.000297, 0.025184, -0.181133, 0.553040, -0.861938, 0.677066, -0.212591)
_C1800 = (
    -0.000009, 0.003844, 0.083563, 0.865736, 4.867575, 15.845535,
    31.332267, 38.291999, 28.316289, 11.636204, 2.043794,
)
_C1700 = (8.118780842, -0.005092142, 0.003336121, -0.0000266484)
_C1600 = (120, -0.9808, -0.01532, 0.000140272128)
_C500 = (1574.2, -556.01, 71.23472, 0.319781, -0.8503463, -0.005050998, 0.0083572073)
_C0 = (10583.6, -1014.41, 33.78311, -5.952053, -0.1798452, 0.022174192, 0.0090316521)
_COTHER = (-20, 0, 32)


def ephemeris_correction(tee: float) -> float:
    """
    Dynamical minus universal time (days) at moment ``tee``.

    The model is piecewise in the Gregorian year containing ``tee``. Ranges
    are tested newest first; the boundaries below are part of the model and
    determine which polynomial a given year uses:

        2051..2150, 2006..2050, 1987..2005, 1900..1986, 1800..1899,
        1700..1799, 1600..1699, 500..1599, -500 < year < 500, else

    The 1800..1986 polynomials are in days of a centurial argument; the rest
    are in seconds.
    """
    year = gregorian_year_from_fixed(math.floor(tee))

    if 2051 <= year <= 2150:
        yy = (year - 1820) / 100
        return (-20 + 32 * yy * yy + 0.5628 * (2150 - year)) / _SECONDS
    if 2006 <= year <= 2050:
        return poly(year - 2000, _C2006) / _SECONDS
    if 1987 <= year <= 2005:
        return poly(year - 2000, _C1987) / _SECONDS
    if 1800 <= year <= 1986:
        c = gregorian_date_difference((1900, 1, 1), (year, 7, 1)) / 36525
        return poly(c, _C1900 if year >= 1900 else _C1800)
    if 1700 <= year <= 1799:
        return poly(year - 1700, _C1700) / _SECONDS
    if 1600 <= year <= 1699:
        return poly(year - 1600, _C1600) / _SECONDS
    if 500 <= year <= 1599:
        return poly((year - 1000) / 100, _C500) / _SECONDS
    if -500 < year < 500:
        return poly(year / 100, _C0) / _SECONDS
    return poly((year - 1820) / 100, _COTHER) / _SECONDS


def dynamical_from_universal(t_universal: float) -> float:
    return t_universal + ephemeris_correction(t_universal)


def universal_from_dynamical(tee: float) -> float:
    # the correction is evaluated at the dynamical moment, as the model defines it
    return tee - ephemeris_correction(tee)


def julian_centuries(tee: float) -> float:
    """Julian centuries of dynamical time since J2000 at universal moment ``tee``."""
    return (dynamical_from_universal(tee) - J2000) / 36525


def sidereal_from_moment(tee: float) -> float:
    """
    Mean sidereal time (degrees, [0, 360)) at universal moment ``tee``.

    Uses universal, not dynamical, centuries.
    """
    c = (tee - J2000) / 36525
    return mod(poly(c, (280.46061837, 36525 * 360.98564736629, 0.000387933, -1 / 38710000)), 360)
