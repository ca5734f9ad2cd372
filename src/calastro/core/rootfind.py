# src/calastro/core/rootfind.py
from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Tuple

from .angles import angdiff180, mod
from .config import DEFAULT_SEARCH, SearchConfig
from .results import BracketError, SearchLimitError

log = logging.getLogger(__name__)


def binary_search(
    lo: float,
    hi: float,
    done: Callable[[float, float], bool],
    go_left: Callable[[float], bool],
) -> float:
    """
    Bisection over [lo, hi].

    Returns the midpoint of the first bracket for which ``done(lo, hi)``
    holds. ``go_left(x)`` decides whether the answer lies in [lo, x].
    """
    while True:
        x = (lo + hi) / 2
        if done(lo, hi):
            return x
        if go_left(x):
            hi = x
        else:
            lo = x


def invert_angular(
    f: Callable[[float], float],
    y: float,
    lo: float,
    hi: float,
    epsilon: Optional[float] = None,
    *,
    config: SearchConfig = DEFAULT_SEARCH,
) -> float:
    """
    Moment in [lo, hi] at which the angular function ``f`` reaches ``y``.

    ``f`` must increase through ``y`` exactly once in the bracket and sweep
    less than 360 degrees across it; brackets of a few days around an
    estimate satisfy this for the sun and moon.

    Parameters
    ----------
    epsilon:
        Stop once the bracket is this narrow (days). Defaults to
        ``config.angular_epsilon``.

    Raises
    ------
    ValueError
        If lo > hi or epsilon is not positive.
    BracketError
        If the converged value misses ``y`` by more than
        ``config.max_residual_deg``, i.e. the bracket held no crossing.
    """
    eps = config.angular_epsilon if epsilon is None else float(epsilon)
    if not (eps > 0 and math.isfinite(eps)):
        raise ValueError(f"epsilon must be positive (got {epsilon!r})")
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise ValueError("bracket must be finite")
    if lo > hi:
        raise ValueError(f"empty bracket: lo={lo} > hi={hi}")

    x = binary_search(
        lo,
        hi,
        lambda a, b: b - a <= eps,
        lambda m: mod(f(m) - y, 360) < 180,
    )

    residual = abs(angdiff180(f(x) - y))
    if residual > config.max_residual_deg:
        raise BracketError(
            f"no crossing of {y} deg in [{lo}, {hi}]: "
            f"converged to {x} with residual {residual:.6f} deg"
        )
    return x


def next_index(
    start: int,
    pred: Callable[[int], bool],
    limit: Optional[int] = None,
) -> int:
    """
    Smallest integer k >= start with pred(k).

    Unbounded when ``limit`` is None: a predicate that never holds makes
    this loop forever. With a limit, at most ``limit`` indices are tried.
    """
    k = start
    tried = 0
    while not pred(k):
        k += 1
        tried += 1
        if limit is not None and tried >= limit:
            raise SearchLimitError(f"no index in [{start}, {k}) satisfies the predicate")
    return k


def final_index(
    start: int,
    pred: Callable[[int], bool],
    limit: Optional[int] = None,
) -> int:
    """
    Scan upward from ``start`` and return the index just before the first
    one where ``pred`` fails. Returns start - 1 if pred(start) is false.

    Unbounded when ``limit`` is None, like next_index.
    """
    k = start
    tried = 0
    while pred(k):
        k += 1
        tried += 1
        if limit is not None and tried >= limit:
            raise SearchLimitError(f"predicate still holds after {limit} indices from {start}")
    return k - 1


def bracket_by_scan(
    f: Callable[[float], float],
    start: float,
    end: float,
    step: float,
) -> List[Tuple[float, float]]:
    """
    Scan [start, end] by fixed step and return candidate sign-change brackets.

    Returns list of (a, b) such that:
      - sign change: f(a) * f(b) < 0  -> (a, b)
      - exact hit at an endpoint -> (a, a) or (b, b)

    ``end`` is evaluated exactly once. Segments with a non-finite value are
    skipped.
    """
    if step <= 0:
        raise ValueError("step must be positive")
    if not (start < end):
        return []

    out: List[Tuple[float, float]] = []
    t_prev, f_prev = start, f(start)
    if f_prev == 0.0:
        out.append((start, start))
    t = start
    while t < end:
        t = min(t + step, end)
        f_cur = f(t)
        if math.isfinite(f_cur) and math.isfinite(f_prev):
            if f_cur == 0.0:
                out.append((t, t))
            elif f_prev * f_cur < 0.0:
                out.append((t_prev, t))
        t_prev, f_prev = t, f_cur

    log.debug("bracket_by_scan [%s, %s] step=%s -> %d brackets", start, end, step, len(out))
    return out


def bisect_sign_change(
    f: Callable[[float], float],
    a: float,
    b: float,
    *,
    tol: float,
    max_iter: int = 100,
) -> float:
    """
    Root of ``f`` on a bracket with f(a) * f(b) <= 0, to within ``tol`` days.
    """
    if tol <= 0:
        raise ValueError("tol must be positive")
    if a > b:
        a, b = b, a
    fa, fb = f(a), f(b)
    if fa == 0.0:
        return a
    if fb == 0.0:
        return b
    if fa * fb > 0.0:
        raise BracketError("root is not bracketed (same sign)")

    for _ in range(max_iter):
        if b - a <= tol:
            break
        m = (a + b) / 2
        fm = f(m)
        if fm == 0.0:
            return m
        if fa * fm < 0.0:
            b, fb = m, fm
        else:
            a, fa = m, fm
    return (a + b) / 2
