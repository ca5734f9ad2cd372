# src/calastro/core/newmoon.py
from __future__ import annotations

import logging
import math
from typing import List

from .angles import mod, poly, round_half_up, sigma, sin_degrees
from .config import DEFAULT_SEARCH, SearchConfig
from .ephemeris import J2000, universal_from_dynamical
from .lunar import lunar_longitude
from .rootfind import final_index, invert_angular, next_index
from .solar import solar_longitude
from .timeutil import require_range

log = logging.getLogger(__name__)

MEAN_SYNODIC_MONTH = 29.530588861

NEW = 0.0
FIRST_QUARTER = 90.0
FULL = 180.0
LAST_QUARTER = 270.0

# index of the new moon of 2000-01-06 counted from that of 0001-01-11
_N0 = 24724

# Meeus ch. 49 periodic corrections: v * E**w * sin(x*M + y*M' + z*F)
_NM_V = (
    -0.40720, 0.17241, 0.01608, 0.01039, 0.00739, -0.00514, 0.00208, -0.00111,
    -0.00057, 0.00056, -0.00042, 0.00042, 0.00038, -0.00024, -0.00007, 0.00004,
    0.00004, 0.00003, 0.00003, -0.00003, 0.00003, -0.00002, -0.00002, 0.00002,
)
_NM_W = (0, 1, 0, 0, 1, 1, 2, 0, 0, 1, 0, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0)
_NM_X = (0, 1, 0, 0, -1, 1, 2, 0, 0, 1, 0, 1, 1, -1, 2, 0, 3, 1, 0, 1, -1, -1, 1, 0)
_NM_Y = (1, 0, 2, 0, 1, 1, 0, 1, 1, 2, 3, 0, 0, 2, 1, 2, 0, 1, 2, 1, 1, 1, 3, 4)
_NM_Z = (0, 0, 0, 2, 0, 0, 0, -2, 2, 0, 0, 2, -2, 0, 0, -2, 0, -2, 2, 2, 2, -2, 0, 0)

# planetary arguments: l * sin(i + j*k)
_ADD_I = (
    251.88, 251.83, 349.42, 84.66, 141.74, 207.14, 154.84, 34.52, 207.19,
    291.34, 161.72, 239.56, 331.55,
)
_ADD_J = (
    0.016321, 26.651886, 36.412478, 18.206239, 53.303771, 2.453732, 7.306860,
    27.261239, 0.121824, 1.844379, 24.198154, 25.513099, 3.592518,
)
_ADD_L = (
    0.000165, 0.000164, 0.000126, 0.000110, 0.000062, 0.000060, 0.000056,
    0.000047, 0.000042, 0.000040, 0.000037, 0.000035, 0.000023,
)



def nth_new_moon(n: int) -> float:
    """
    Universal moment of the n-th new moon after the one of 0001-01-11.

    Closed form (Meeus ch. 49), no searching.
    """
    k = n - _N0
    c = k / 1236.85
    approx = J2000 + poly(
        c, (5.09766, MEAN_SYNODIC_MONTH * 1236.85, 0.00015437, -0.000000150, 0.00000000073)
    )
    e = poly(c, (1, -0.002516, -0.0000074))
    solar_anom = poly(c, (2.5534, 1236.85 * 29.10535670, -0.0000014, -0.00000011))
    lunar_anom = poly(c, (201.5643, 385.81693528 * 1236.85, 0.0107582, 0.00001238, -0.000000058))
    moon_argument = poly(c, (160.7108, 390.67050284 * 1236.85, -0.0016118, -0.00000227, 0.000000011))
    omega = poly(c, (124.7746, -1.56375588 * 1236.85, 0.0020672, 0.00000215))

    correction = -0.00017 * sin_degrees(omega) + sigma(
        (_NM_V, _NM_W, _NM_X, _NM_Y, _NM_Z),
        lambda v, w, x, y, z: v * math.pow(e, w)
        * sin_degrees(x * solar_anom + y * lunar_anom + z * moon_argument),
    )
    extra = 0.000325 * sin_degrees(poly(c, (299.77, 132.8475848, -0.009173)))
    additional = sigma(
        (_ADD_I, _ADD_J, _ADD_L),
        lambda i, j, l: l * sin_degrees(i + j * k),
    )
    return universal_from_dynamical(approx + correction + extra + additional)


def lunar_phase(tee: float) -> float:
    """
    Moon minus sun longitude (degrees, [0, 360)) at moment ``tee``.

    0 is new moon, 90 first quarter, 180 full, 270 last quarter. Near the
    wrap the series value is checked against the mean-motion phase.
    """
    phi = mod(lunar_longitude(tee) - solar_longitude(tee), 360)
    t0 = nth_new_moon(0)
    n = round_half_up((tee - t0) / MEAN_SYNODIC_MONTH)
    phi_prime = 360 * mod((tee - nth_new_moon(n)) / MEAN_SYNODIC_MONTH, 1)
    if abs(phi - phi_prime) > 180:
        return phi_prime
    return phi


def _estimated_index(tee: float) -> int:
    t0 = nth_new_moon(0)
    return round_half_up((tee - t0) / MEAN_SYNODIC_MONTH - lunar_phase(tee) / 360)


def new_moon_before(tee: float, *, config: SearchConfig = DEFAULT_SEARCH) -> float:
    """Universal moment of the last new moon strictly before ``tee``."""
    n = _estimated_index(tee)
    k = final_index(n - 1, lambda i: nth_new_moon(i) < tee, limit=config.search_limit)
    return nth_new_moon(k)


def new_moon_at_or_after(tee: float, *, config: SearchConfig = DEFAULT_SEARCH) -> float:
    """Universal moment of the first new moon at or after ``tee``."""
    n = _estimated_index(tee)
    k = next_index(n, lambda i: nth_new_moon(i) >= tee, limit=config.search_limit)
    return nth_new_moon(k)


def lunar_phase_at_or_before(phi: float, tee: float, *, config: SearchConfig = DEFAULT_SEARCH) -> float:
    """Last universal moment at or before ``tee`` with lunar phase ``phi``."""
    tau = tee - (MEAN_SYNODIC_MONTH / 360) * mod(lunar_phase(tee) - phi, 360)
    lo = tau - 2
    hi = min(tee, tau + 2)
    return invert_angular(lunar_phase, phi, lo, hi, config=config)


def lunar_phase_at_or_after(phi: float, tee: float, *, config: SearchConfig = DEFAULT_SEARCH) -> float:
    """First universal moment at or after ``tee`` with lunar phase ``phi``."""
    tau = tee + (MEAN_SYNODIC_MONTH / 360) * mod(phi - lunar_phase(tee), 360)
    lo = max(tee, tau - 2)
    hi = tau + 2
    return invert_angular(lunar_phase, phi, lo, hi, config=config)


def new_moons_between(start: float, end: float, *, config: SearchConfig = DEFAULT_SEARCH) -> List[float]:
    """
    New moon moments in [start, end), ascending.
    """
    start, end = require_range(start, end)
    out: List[float] = []
    n = next_index(_estimated_index(start), lambda i: nth_new_moon(i) >= start, limit=config.search_limit)
    while True:
        t = nth_new_moon(n)
        if t >= end:
            break
        out.append(t)
        n += 1
    log.debug("new_moons_between [%s, %s) -> %d", start, end, len(out))
    return out


def lunar_phases_between(
    start: float,
    end: float,
    phi: float,
    *,
    config: SearchConfig = DEFAULT_SEARCH,
) -> List[float]:
    """
    Moments in [start, end) at which the lunar phase equals ``phi``, ascending.
    """
    start, end = require_range(start, end)
    out: List[float] = []
    t = lunar_phase_at_or_after(phi, start, config=config)
    while t < end:
        out.append(t)
        # a phase recurs no sooner than ~29.3 days later
        t = lunar_phase_at_or_after(phi, t + 1, config=config)
    log.debug("lunar_phases_between [%s, %s) phi=%s -> %d", start, end, phi, len(out))
    return out
