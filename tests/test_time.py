from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from calastro.core.gregorian import (
    fixed_from_gregorian,
    gregorian_date_difference,
    gregorian_leap_year,
    gregorian_year_from_fixed,
)
from calastro.core.timeutil import (
    clock_from_moment,
    datetime_from_moment,
    hours,
    jd_from_moment,
    moment_from_datetime,
    moment_from_jd,
    moment_from_unix,
    require_range,
    time_from_clock,
)

UTC = timezone.utc


def test_gregorian_epoch_and_j2000():
    assert fixed_from_gregorian(1, 1, 1) == 1
    assert fixed_from_gregorian(2000, 1, 1) == 730120
    assert fixed_from_gregorian(1970, 1, 1) == datetime(1970, 1, 1).toordinal()


@pytest.mark.parametrize("year", [-600, -1, 0, 1, 1582, 1900, 2000, 2024, 2150])
def test_gregorian_year_round_trip(year):
    assert gregorian_year_from_fixed(fixed_from_gregorian(year, 1, 1)) == year
    assert gregorian_year_from_fixed(fixed_from_gregorian(year, 12, 31)) == year


def test_leap_years_and_difference():
    assert gregorian_leap_year(2000)
    assert not gregorian_leap_year(1900)
    assert gregorian_leap_year(2024)
    assert gregorian_date_difference((2000, 1, 1), (2001, 1, 1)) == 366


def test_moment_from_datetime_requires_aware():
    assert moment_from_datetime(datetime(2000, 1, 1, 12, tzinfo=UTC)) == pytest.approx(730120.5)
    jst = timezone(timedelta(hours=9))
    assert moment_from_datetime(datetime(2000, 1, 1, 21, tzinfo=jst)) == pytest.approx(730120.5)
    with pytest.raises(ValueError):
        moment_from_datetime(datetime(2000, 1, 1, 12))


def test_datetime_from_moment_with_offset():
    assert datetime_from_moment(730120.5) == datetime(2000, 1, 1, 12, tzinfo=UTC)
    dt = datetime_from_moment(730120.5 + hours(9), offset=hours(9))
    assert dt.utcoffset() == timedelta(hours=9)
    assert (dt.hour, dt.minute) == (21, 0)
    assert dt.astimezone(UTC) == datetime(2000, 1, 1, 12, tzinfo=UTC)
    with pytest.raises(ValueError):
        datetime_from_moment(float("nan"))


def test_julian_day_and_unix():
    assert jd_from_moment(730120.5) == pytest.approx(2451545.0)
    assert moment_from_jd(2451545.0) == pytest.approx(730120.5)
    assert moment_from_unix(0) == fixed_from_gregorian(1970, 1, 1)
    assert moment_from_unix(86400 * 1.5) == pytest.approx(fixed_from_gregorian(1970, 1, 2) + 0.5)


def test_clock():
    assert clock_from_moment(730120.75) == (18, 0, 0)
    assert time_from_clock(6, 30, 0) == pytest.approx(6.5 / 24)


def test_require_range():
    assert require_range(1.0, 2.0) == (1.0, 2.0)
    with pytest.raises(ValueError):
        require_range(2.0, 2.0)
    with pytest.raises(ValueError):
        require_range(float("-inf"), 2.0)
