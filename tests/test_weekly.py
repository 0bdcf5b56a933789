"""
Tests for weekly rules and availability expansion.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from conftest import FixedOffsetResolver, utc
from weekly_availability.core.errors import InvalidTimeFormatError, InvalidZoneError
from weekly_availability.core.ranges import Interval
from weekly_availability.core.weekly import (
    Weekday,
    WeeklyRule,
    expand_availability,
    hour_minute_to_seconds,
    index_by_weekday,
    is_valid_hour_minute,
)


def rule(day: str, start: str, end: str) -> WeeklyRule:
    return WeeklyRule(Weekday[day], start, end)


class TestWeekday:
    """Weekday enum."""

    def test_sunday_first(self):
        assert [d.name for d in Weekday] == ["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"]
        assert Weekday.SUN == 0 and Weekday.SAT == 6

    def test_of_datetime(self):
        assert Weekday.of(utc(2024, 1, 14)) == Weekday.SUN
        assert Weekday.of(utc(2024, 1, 15)) == Weekday.MON
        assert Weekday.of(utc(2024, 1, 20)) == Weekday.SAT

    @pytest.mark.parametrize("value", ["MON", "mon", " Mon ", 1, Weekday.MON])
    def test_parse(self, value):
        assert Weekday.parse(value) == Weekday.MON

    @pytest.mark.parametrize("value", ["Monday", "", None, 7, -1, True, False, 1.0])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid weekday"):
            Weekday.parse(value)

    def test_parse_out_of_range_int_message(self):
        with pytest.raises(ValueError, match=r"Invalid weekday: 7\. Use one of: SUN, MON"):
            Weekday.parse(7)


class TestHourMinute:
    """HH:mm helpers."""

    @pytest.mark.parametrize("value", ["00:00", "09:30", "23:59"])
    def test_valid(self, value):
        assert is_valid_hour_minute(value)

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "12:00:00", "noon", "", None])
    def test_invalid(self, value):
        assert not is_valid_hour_minute(value)

    def test_to_seconds(self):
        assert hour_minute_to_seconds("00:00") == 0
        assert hour_minute_to_seconds("09:30") == 34200
        assert hour_minute_to_seconds("23:59") == 86340
        assert hour_minute_to_seconds("25:00") is None


class TestIndexByWeekday:
    """Grouping rules by weekday."""

    def test_every_weekday_present(self):
        index = index_by_weekday([])
        assert set(index) == set(Weekday)
        assert all(rules == [] for rules in index.values())

    def test_keeps_input_order(self):
        late = rule("MON", "14:00", "16:00")
        early = rule("MON", "09:00", "11:00")
        friday = rule("FRI", "10:00", "12:00")
        index = index_by_weekday([late, friday, early])

        assert index[Weekday.MON] == [late, early]
        assert index[Weekday.FRI] == [friday]
        assert index[Weekday.TUE] == []


class TestExpandAvailability:
    """Expanding weekly rules over a window."""

    def test_new_york_monday_winter(self):
        result = expand_availability(
            utc(2024, 1, 15), utc(2024, 1, 22),
            [rule("MON", "09:00", "17:00")],
            "America/New_York",
        )
        assert result == [Interval(utc(2024, 1, 15, 14), utc(2024, 1, 15, 22))]

    def test_new_york_monday_summer(self):
        result = expand_availability(
            utc(2024, 7, 15), utc(2024, 7, 22),
            [rule("MON", "09:00", "17:00")],
            "America/New_York",
        )
        assert result == [Interval(utc(2024, 7, 15, 13), utc(2024, 7, 15, 21))]

    def test_week_across_dst_start(self):
        # US clocks moved forward on Sunday 2024-03-10
        result = expand_availability(
            utc(2024, 3, 8), utc(2024, 3, 12),
            [rule("FRI", "09:00", "10:00"), rule("MON", "09:00", "10:00")],
            "America/New_York",
        )
        assert result == [
            Interval(utc(2024, 3, 8, 14), utc(2024, 3, 8, 15)),
            Interval(utc(2024, 3, 11, 13), utc(2024, 3, 11, 14)),
        ]

    def test_every_interval_overlaps_window(self):
        window_start = utc(2024, 1, 10, 6)
        window_end = utc(2024, 1, 17, 18)
        rules = [rule(day.name, "00:00", "23:59") for day in Weekday]

        result = expand_availability(window_start, window_end, rules, "Pacific/Auckland")

        assert result
        for interval in result:
            assert interval.end > window_start
            assert interval.start < window_end

    def test_rule_lands_on_previous_utc_day(self):
        # Monday 01:00 in Tokyo is Sunday 16:00 UTC
        rules = [rule("MON", "01:00", "03:00")]

        sunday_utc = expand_availability(utc(2024, 1, 14), utc(2024, 1, 15), rules, "Asia/Tokyo")
        monday_utc = expand_availability(utc(2024, 1, 15), utc(2024, 1, 16), rules, "Asia/Tokyo")

        assert sunday_utc == [Interval(utc(2024, 1, 14, 16), utc(2024, 1, 14, 18))]
        assert monday_utc == []

    def test_partial_overlap_is_kept_whole(self):
        result = expand_availability(
            utc(2024, 1, 15, 12), utc(2024, 1, 15, 13),
            [rule("MON", "09:00", "17:00")],
            "UTC",
        )
        assert result == [Interval(utc(2024, 1, 15, 9), utc(2024, 1, 15, 17))]

    def test_touching_window_edges_is_excluded(self):
        rules = [rule("MON", "09:00", "17:00")]
        assert expand_availability(utc(2024, 1, 15, 17), utc(2024, 1, 15, 20), rules, "UTC") == []
        assert expand_availability(utc(2024, 1, 15, 6), utc(2024, 1, 15, 9), rules, "UTC") == []

    def test_order_is_day_then_rule(self):
        tue_late = rule("TUE", "15:00", "16:00")
        mon = rule("MON", "09:00", "10:00")
        tue_early = rule("TUE", "08:00", "09:00")

        result = expand_availability(utc(2024, 1, 15), utc(2024, 1, 17), [tue_late, mon, tue_early], "UTC")

        assert result == [
            Interval(utc(2024, 1, 15, 9), utc(2024, 1, 15, 10)),
            Interval(utc(2024, 1, 16, 15), utc(2024, 1, 16, 16)),
            Interval(utc(2024, 1, 16, 8), utc(2024, 1, 16, 9)),
        ]

    def test_overlapping_rules_are_not_merged(self):
        rules = [rule("WED", "09:00", "12:00"), rule("WED", "11:00", "14:00")]
        result = expand_availability(utc(2024, 1, 17), utc(2024, 1, 18), rules, "UTC")
        assert len(result) == 2

    def test_injected_resolver(self):
        resolver = FixedOffsetResolver(timedelta(hours=2))
        result = expand_availability(
            utc(2024, 1, 15), utc(2024, 1, 16),
            [rule("MON", "09:00", "17:00")],
            "Europe/Athens",
            resolver,
        )
        assert result == [Interval(utc(2024, 1, 15, 7), utc(2024, 1, 15, 15))]

    def test_multi_week_window(self):
        result = expand_availability(utc(2024, 1, 1), utc(2024, 2, 1), [rule("THU", "10:00", "11:00")], "UTC")
        assert [interval.start.day for interval in result] == [4, 11, 18, 25]

    def test_no_rules(self):
        assert expand_availability(utc(2024, 1, 15), utc(2024, 1, 22), [], "UTC") == []

    def test_empty_window(self):
        rules = [rule("MON", "09:00", "17:00")]
        assert expand_availability(utc(2024, 1, 15, 12), utc(2024, 1, 15, 12), rules, "UTC") == []

    def test_inverted_window(self):
        rules = [rule("MON", "09:00", "17:00")]
        assert expand_availability(utc(2024, 1, 22), utc(2024, 1, 15), rules, "UTC") == []

    def test_invalid_zone(self):
        with pytest.raises(InvalidZoneError):
            expand_availability(utc(2024, 1, 15), utc(2024, 1, 22), [rule("MON", "09:00", "17:00")], "Not/AZone")

    @pytest.mark.parametrize("start,end", [("9:00", "17:00"), ("09:00", "24:00"), ("09:00", "5pm")])
    def test_invalid_rule_time(self, start, end):
        with pytest.raises(InvalidTimeFormatError):
            expand_availability(utc(2024, 1, 15), utc(2024, 1, 22), [rule("MON", start, end)], "UTC")

    def test_invalid_rule_time_on_unused_weekday_still_fails(self):
        rules = [rule("MON", "09:00", "17:00"), rule("SAT", "10:00", "99:00")]
        with pytest.raises(InvalidTimeFormatError):
            expand_availability(utc(2024, 1, 15), utc(2024, 1, 16), rules, "UTC")

    @pytest.mark.parametrize("naive_start", [True, False])
    def test_naive_window_rejected(self, naive_start):
        aware, naive = utc(2024, 1, 15), datetime(2024, 1, 22)
        start, end = (naive, aware) if naive_start else (aware, naive)
        with pytest.raises(ValueError, match="timezone-aware"):
            expand_availability(start, end, [rule("MON", "09:00", "17:00")], "UTC")

    def test_days_are_utc_dates_for_offset_window(self):
        # Monday 00:30 in Tokyo is Sunday 15:30Z; the Monday rule still resolves
        # on the Monday UTC date
        window_start = datetime(2024, 1, 15, 0, 30, tzinfo=ZoneInfo("Asia/Tokyo"))
        window_end = datetime(2024, 1, 16, 0, 30, tzinfo=ZoneInfo("Asia/Tokyo"))
        result = expand_availability(window_start, window_end, [rule("MON", "09:00", "17:00")], "Asia/Tokyo")
        assert result == [Interval(utc(2024, 1, 15, 0), utc(2024, 1, 15, 8))]
