"""Tests for the month interval calculator."""

import calendar
import datetime
from zoneinfo import ZoneInfo

import pytest

from worklog_report.errors import InvalidArgumentError
from worklog_report.reporting.interval import (
    current_month,
    from_millis,
    month_interval,
    previous_month,
    resolve_zone,
    to_millis,
)

BUCHAREST = "Europe/Bucharest"


class TestMonthBoundaries:

    @pytest.mark.parametrize("zone", [BUCHAREST, "UTC", "America/New_York", "Asia/Kolkata"])
    @pytest.mark.parametrize("month", range(1, 13))
    def test_start_before_end_and_local_dates(self, zone, month):
        interval = month_interval(2023, month, zone)
        tz = ZoneInfo(zone)
        start_local = from_millis(interval.start_millis).astimezone(tz)
        end_local = from_millis(interval.end_millis).astimezone(tz)

        assert interval.start < interval.end
        assert start_local.day == 1
        assert start_local.month == month
        assert (start_local.hour, start_local.minute) == (0, 0)
        assert end_local.day == calendar.monthrange(2023, month)[1]
        assert end_local.month == month
        assert (end_local.hour, end_local.minute, end_local.second) == (23, 59, 59)

    def test_february_leap_year(self):
        interval = month_interval(2024, 2, BUCHAREST)
        assert interval.end.day == 29

    def test_february_common_year(self):
        interval = month_interval(2023, 2, BUCHAREST)
        assert interval.end.day == 28

    def test_start_is_local_midnight(self, utc_millis):
        interval = month_interval(2024, 3, BUCHAREST)
        # 2024-03-01 00:00 at UTC+2
        assert interval.start_millis == utc_millis(2024, 2, 29, 22, 0)

    def test_end_is_one_milli_before_next_month(self):
        march = month_interval(2024, 3, BUCHAREST)
        april = month_interval(2024, 4, BUCHAREST)
        assert march.end_millis == april.start_millis - 1

    def test_december_rolls_into_january(self):
        december = month_interval(2023, 12, BUCHAREST)
        january = month_interval(2024, 1, BUCHAREST)
        assert december.end_millis == january.start_millis - 1


class TestDaylightSaving:

    def test_spring_forward_offsets_differ(self):
        # Bucharest moves from UTC+2 to UTC+3 on 2024-03-31.
        interval = month_interval(2024, 3, BUCHAREST)
        assert interval.start.utcoffset() == datetime.timedelta(hours=2)
        assert interval.end.utcoffset() == datetime.timedelta(hours=3)

    def test_spring_forward_month_is_an_hour_short(self):
        interval = month_interval(2024, 3, BUCHAREST)
        span = interval.end_millis - interval.start_millis + 1
        assert span == (31 * 24 - 1) * 3_600_000

    def test_fall_back_month_is_an_hour_long(self):
        # Back to UTC+2 on 2024-10-27.
        interval = month_interval(2024, 10, BUCHAREST)
        span = interval.end_millis - interval.start_millis + 1
        assert span == (31 * 24 + 1) * 3_600_000

    def test_utc_month_has_no_shift(self):
        interval = month_interval(2024, 3, "UTC")
        span = interval.end_millis - interval.start_millis + 1
        assert span == 31 * 24 * 3_600_000


class TestContains:

    def test_bounds_are_inclusive(self):
        interval = month_interval(2024, 3, BUCHAREST)
        assert interval.contains(interval.start_millis)
        assert interval.contains(interval.end_millis)
        assert not interval.contains(interval.start_millis - 1)
        assert not interval.contains(interval.end_millis + 1)


class TestInvalidArguments:

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_month_out_of_range(self, month):
        with pytest.raises(InvalidArgumentError, match="Month"):
            month_interval(2024, month, BUCHAREST)

    def test_year_out_of_range(self):
        with pytest.raises(InvalidArgumentError, match="Year"):
            month_interval(10_000, 1, BUCHAREST)

    @pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "", "   "])
    def test_unknown_zone(self, zone):
        with pytest.raises(InvalidArgumentError):
            month_interval(2024, 3, zone)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            month_interval(2024, 13, BUCHAREST)


class TestHelpers:

    def test_millis_round_trip(self, utc_millis):
        millis = utc_millis(2024, 3, 1, 10, 0, 0, 250)
        assert to_millis(from_millis(millis)) == millis

    def test_resolve_zone_accepts_zoneinfo(self):
        tz = ZoneInfo(BUCHAREST)
        assert resolve_zone(tz) is tz

    @pytest.mark.parametrize("today, expected", [
        (datetime.date(2024, 3, 1), (2024, 2)),
        (datetime.date(2024, 3, 31), (2024, 2)),
        (datetime.date(2024, 1, 15), (2023, 12)),
    ])
    def test_previous_month(self, today, expected):
        assert previous_month(today) == expected

    def test_current_month_uses_zone_calendar(self):
        # 22:30 UTC on Jan 31 is already Feb 1 in Bucharest.
        now = datetime.datetime(2024, 1, 31, 22, 30, tzinfo=datetime.timezone.utc)
        assert current_month(BUCHAREST, now=now) == (2024, 2)
        assert current_month("UTC", now=now) == (2024, 1)
