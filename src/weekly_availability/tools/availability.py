"""
availability tool.

Unified tool for weekly availability: expand rules, subtract busy time,
filter short slots, group free time by date.
"""

import logging
from datetime import datetime, timedelta
from functools import wraps
from typing import Callable, Literal, Optional
from zoneinfo import ZoneInfo

from weekly_availability.core.dates import days_of_month, parse_month, start_of_month
from weekly_availability.core.errors import (
    InvalidIntervalError,
    InvalidTimeFormatError,
    InvalidZoneError,
)
from weekly_availability.core.ranges import (
    Interval,
    filter_by_minimum_duration,
    group_by_local_date,
    subtract_busy_time,
)
from weekly_availability.core.timezones import validate_timezone
from weekly_availability.core.weekly import expand_availability
from weekly_availability.settings import settings
from weekly_availability.utils.timeparse import (
    parse_datetime,
    parse_intervals,
    parse_rules,
)


logger = logging.getLogger(__name__)


def handle_availability_errors(func: Callable) -> Callable:
    """
    Decorator to return input errors as structured dict.

    Bad zones, bad time strings and inverted intervals come back as
    {"error": "invalid_timezone", "message": "...", ...}
    instead of a plain text tool failure. Internal consistency errors are
    not caught.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (InvalidZoneError, InvalidTimeFormatError, InvalidIntervalError) as e:
            logger.warning(f"Input error in {func.__name__}: {e}")
            return e.to_dict()
    return wrapper


@handle_availability_errors
def availability(
    action: Literal["expand", "subtract", "filter", "free_slots", "by_date", "month"] = "free_slots",
    time_min: Optional[str] = None,
    time_max: Optional[str] = None,
    weekly_rules: Optional[list[dict]] = None,
    timezone: Optional[str] = None,
    intervals: Optional[list[dict]] = None,
    busy: Optional[list[dict]] = None,
    min_duration_minutes: Optional[int] = None,
    month: Optional[str] = None,
    months_ahead: int = 0,
) -> dict:
    """Compute free time from a weekly schedule and busy intervals.

    Weekly rules are local wall-clock windows: {"weekday": "MON", "start_time": "09:00", "end_time": "17:00"}.
    Intervals and busy blocks are {"start": ISO, "end": ISO}. Naive datetimes use `timezone`.

    Actions:
        expand: Weekly rules -> absolute intervals within time_min..time_max.
        subtract: Remove busy from intervals. Pieces are not merged.
        filter: Drop intervals shorter than min_duration_minutes.
        free_slots: expand, subtract busy, filter (default).
        by_date: free_slots grouped by calendar date (server local time).
        month: free_slots for a whole month ('YYYY-MM', shifted by months_ahead).

    Params:
        timezone: IANA zone of the weekly rules and of the output. Default from settings.
        min_duration_minutes: Default from settings (free_slots/by_date/month).

    Examples:
        availability(action="free_slots", time_min="2025-01-13", time_max="2025-01-20",
                     weekly_rules=[{"weekday": "MON", "start_time": "09:00", "end_time": "17:00"}],
                     busy=[{"start": "2025-01-13T11:00:00", "end": "2025-01-13T12:00:00"}],
                     timezone="Europe/London", min_duration_minutes=30)
        availability(action="month", month="2025-03", weekly_rules=[...], timezone="America/New_York")
    """
    timezone = validate_timezone(timezone or settings.default_timezone)

    if action == "expand":
        result = _expand(time_min, time_max, weekly_rules, timezone)
        return _intervals_response(result, timezone)

    elif action == "subtract":
        result = subtract_busy_time(
            parse_intervals(intervals, timezone),
            parse_intervals(busy, timezone),
        )
        return _intervals_response(result, timezone)

    elif action == "filter":
        if min_duration_minutes is None:
            raise ValueError("min_duration_minutes is required for 'filter' action")
        result = filter_by_minimum_duration(
            parse_intervals(intervals, timezone),
            _min_duration(min_duration_minutes),
        )
        return _intervals_response(result, timezone)

    elif action == "free_slots":
        result = _free_slots(time_min, time_max, weekly_rules, busy, timezone, min_duration_minutes)
        return _intervals_response(result, timezone)

    elif action == "by_date":
        result = _free_slots(time_min, time_max, weekly_rules, busy, timezone, min_duration_minutes)
        dates = {
            day: [_format(interval, timezone) for interval in day_intervals]
            for day, day_intervals in group_by_local_date(result).items()
        }
        return {
            "dates": dates,
            "timezone": timezone,
            "total": len(result),
        }

    elif action == "month":
        if not month:
            raise ValueError("month is required for 'month' action (YYYY-MM)")
        first_day = start_of_month(parse_month(month), months_ahead)
        tz = ZoneInfo(timezone)
        range_start = datetime.combine(first_day, datetime.min.time(), tzinfo=tz)
        range_end = datetime.combine(start_of_month(first_day, 1), datetime.min.time(), tzinfo=tz)
        result = _free_pipeline(
            range_start, range_end, parse_rules(weekly_rules),
            parse_intervals(busy, timezone), timezone, min_duration_minutes,
        )
        return {
            "month": first_day.strftime("%Y-%m"),
            "days": days_of_month(first_day),
            **_intervals_response(result, timezone),
        }

    else:
        raise ValueError(
            f"Unknown action: {action}. Use 'expand', 'subtract', 'filter', 'free_slots', 'by_date' or 'month'."
        )


def _window(time_min: Optional[str], time_max: Optional[str], timezone: str) -> tuple[datetime, datetime]:
    if not time_min or not time_max:
        raise ValueError("time_min and time_max are required")
    return parse_datetime(time_min, timezone), parse_datetime(time_max, timezone)


def _min_duration(minutes: Optional[int]) -> timedelta:
    if minutes is None:
        minutes = settings.min_duration_minutes
    if minutes < 0:
        raise ValueError("min_duration_minutes must be >= 0")
    return timedelta(minutes=minutes)


def _expand(time_min, time_max, weekly_rules, timezone: str) -> list[Interval]:
    range_start, range_end = _window(time_min, time_max, timezone)
    return expand_availability(range_start, range_end, parse_rules(weekly_rules), timezone)


def _free_slots(time_min, time_max, weekly_rules, busy, timezone, min_duration_minutes) -> list[Interval]:
    range_start, range_end = _window(time_min, time_max, timezone)
    return _free_pipeline(
        range_start, range_end, parse_rules(weekly_rules),
        parse_intervals(busy, timezone), timezone, min_duration_minutes,
    )


def _free_pipeline(range_start, range_end, rules, busy, timezone, min_duration_minutes) -> list[Interval]:
    """Expand rules, remove busy time, drop short slots."""
    min_duration = _min_duration(min_duration_minutes)
    available = expand_availability(range_start, range_end, rules, timezone)
    free = subtract_busy_time(available, busy)
    return filter_by_minimum_duration(free, min_duration)


def _format(interval: Interval, timezone: str) -> dict:
    return interval.to_dict(ZoneInfo(timezone))


def _intervals_response(intervals: list[Interval], timezone: str) -> dict:
    return {
        "intervals": [_format(interval, timezone) for interval in intervals],
        "timezone": timezone,
        "total": len(intervals),
    }
