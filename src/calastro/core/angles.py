# src/calastro/core/angles.py
from __future__ import annotations

import math
from typing import Callable, Sequence

from .results import NO_EVENT, MaybeAngle

_DEG_PER_RAD = 180.0 / math.pi


def mod(x: float, y: float) -> float:
    """x - y * floor(x / y); result has the sign of y."""
    return x - y * math.floor(x / y)


def mod3(x: float, a: float, b: float) -> float:
    """Shift x into [a, b). Returns x unchanged when a == b."""
    if a == b:
        return x
    return a + mod(x - a, b - a)


def norm360(deg: float) -> float:
    """Normalize to [0, 360)."""
    return mod(deg, 360.0)


def angdiff180(deg: float) -> float:
    """Map angle to [-180, 180)."""
    return mod3(deg, -180.0, 180.0)


def sign(y: float) -> int:
    if y < 0:
        return -1
    if y > 0:
        return 1
    return 0


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def degrees_minutes_seconds(d: float, m: float = 0.0, s: float = 0.0) -> float:
    """
    Decimal degrees from degrees/arcminutes/arcseconds.

    The sign of ``d`` applies to the whole angle: (-3, 30, 0) is -3.5.
    """
    frac = (m + s / 60.0) / 60.0
    if d < 0 or (d == 0 and math.copysign(1.0, d) < 0):
        return d - frac
    return d + frac


def arcminutes(x: float) -> float:
    return x / 60.0


def arcseconds(x: float) -> float:
    return x / 3600.0


def degrees_from_radians(theta: float) -> float:
    return mod(theta * _DEG_PER_RAD, 360.0)


def radians_from_degrees(theta: float) -> float:
    return mod(theta, 360.0) / _DEG_PER_RAD


def sin_degrees(theta: float) -> float:
    return math.sin(radians_from_degrees(theta))


def cos_degrees(theta: float) -> float:
    return math.cos(radians_from_degrees(theta))


def tan_degrees(theta: float) -> float:
    return math.tan(radians_from_degrees(theta))


def arcsin_degrees(x: float) -> float:
    """Arcsine in degrees, in [0, 360)."""
    return degrees_from_radians(math.asin(x))


def arccos_degrees(x: float) -> float:
    """Arccosine in degrees, in [0, 360)."""
    return degrees_from_radians(math.acos(x))


def arctan_degrees(y: float, x: float) -> MaybeAngle:
    """
    Arctangent of y/x in degrees, in [0, 360), quadrant taken from the signs.

    Undefined at the origin: returns NO_EVENT for x == y == 0.
    """
    if x == 0 and y == 0:
        return NO_EVENT
    if x == 0:
        return mod(sign(y) * 90.0, 360.0)
    alpha = mod(degrees_from_radians(math.atan(y / x)), 360.0)
    if x >= 0:
        return alpha
    return mod(alpha + 180.0, 360.0)


def poly(x: float, coeffs: Sequence[float]) -> float:
    """
    Sum of coeffs[i] * x**i, ascending order.

    Terms are accumulated left to right in table order.
    """
    if not coeffs:
        return 0.0
    if len(coeffs) == 1:
        return coeffs[0]
    return sum(a * math.pow(x, i) for i, a in enumerate(coeffs))


def sigma(tables: Sequence[Sequence[float]], body: Callable[..., float]) -> float:
    """
    Sum ``body`` over parallel sequences consumed in lock-step.

    ``body`` receives one element of each table per term.
    """
    if not tables:
        return 0.0
    n = len(tables[0])
    for t in tables[1:]:
        if len(t) != n:
            raise ValueError(f"periodic-term tables differ in length: {n} != {len(t)}")
    return sum(body(*row) for row in zip(*tables))
