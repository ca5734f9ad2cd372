# src/calastro/core/gregorian.py
from __future__ import annotations

import math

GREGORIAN_EPOCH = 1


def gregorian_leap_year(year: int) -> bool:
    return year % 4 == 0 and year % 400 not in (100, 200, 300)


def fixed_from_gregorian(year: int, month: int, day: int) -> int:
    """RD fixed date of a proleptic Gregorian date (year 0 = 1 BCE)."""
    if month <= 2:
        correction = 0
    elif gregorian_leap_year(year):
        correction = -1
    else:
        correction = -2
    y = year - 1
    return (
        GREGORIAN_EPOCH - 1
        + 365 * y
        + math.floor(y / 4)
        - math.floor(y / 100)
        + math.floor(y / 400)
        + math.floor((367 * month - 362) / 12)
        + correction
        + day
    )


def gregorian_new_year(year: int) -> int:
    return fixed_from_gregorian(year, 1, 1)


def gregorian_year_from_fixed(fixed: int) -> int:
    d0 = fixed - GREGORIAN_EPOCH
    n400, d1 = divmod(d0, 146097)
    n100, d2 = divmod(d1, 36524)
    n4, d3 = divmod(d2, 1461)
    n1 = d3 // 365
    year = 400 * n400 + 100 * n100 + 4 * n4 + n1
    if n100 == 4 or n1 == 4:
        return year
    return year + 1


def gregorian_date_difference(
    date1: tuple[int, int, int],
    date2: tuple[int, int, int],
) -> int:
    return fixed_from_gregorian(*date2) - fixed_from_gregorian(*date1)
