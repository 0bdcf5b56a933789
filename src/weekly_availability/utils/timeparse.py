"""
Parsing of tool and CLI input into engine values.

Accepted datetime forms:
- '2025-01-15' (date, midnight in the given timezone)
- '2025-01-15T09:00:00' (naive, interpreted in the given timezone)
- '2025-01-15T09:00:00Z' or '2025-01-15T09:00:00+02:00' (absolute)
"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from weekly_availability.core.errors import InvalidIntervalError, InvalidTimeFormatError
from weekly_availability.core.ranges import Interval
from weekly_availability.core.timezones import validate_timezone
from weekly_availability.core.weekly import Weekday, WeeklyRule


def parse_datetime(value: str, timezone: str = "UTC") -> datetime:
    """
    Parse an ISO date or datetime into a timezone-aware datetime.

    Args:
        value: ISO date or datetime string
        timezone: IANA zone for dates and naive datetimes

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidTimeFormatError: Not an ISO date/datetime
        InvalidZoneError: Unknown timezone
    """
    tz = ZoneInfo(validate_timezone(timezone))

    if not isinstance(value, str) or not value.strip():
        raise InvalidTimeFormatError(value, expected="ISO 8601 date or datetime")
    value = value.strip()

    try:
        if "T" in value:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        else:
            parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise InvalidTimeFormatError(value, expected="ISO 8601 date or datetime") from None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def parse_interval(obj: dict, timezone: str = "UTC") -> Interval:
    """
    {"start": ..., "end": ...} -> Interval.

    Raises:
        InvalidTimeFormatError: Wrong shape or unparseable datetime
        InvalidIntervalError: end before start
    """
    if not isinstance(obj, dict) or "start" not in obj or "end" not in obj:
        raise InvalidTimeFormatError(obj, expected='{"start": ..., "end": ...}')
    start = parse_datetime(obj["start"], timezone)
    end = parse_datetime(obj["end"], timezone)
    if end < start:
        raise InvalidIntervalError(obj["start"], obj["end"])
    return Interval(start=start, end=end)


def parse_intervals(items: Optional[list[dict]], timezone: str = "UTC") -> list[Interval]:
    return [parse_interval(item, timezone) for item in items or []]


def parse_rule(obj: dict) -> WeeklyRule:
    """
    {"weekday": "MON", "start_time": "09:00", "end_time": "17:00"} -> WeeklyRule.

    Raises:
        ValueError: Unknown weekday
        InvalidTimeFormatError: Time not in HH:mm format
    """
    if not isinstance(obj, dict):
        raise ValueError(f"Weekly rule must be an object, got: {obj!r}")
    missing = [key for key in ("weekday", "start_time", "end_time") if key not in obj]
    if missing:
        raise ValueError(f"Weekly rule missing fields: {', '.join(missing)}")

    return WeeklyRule(
        weekday=Weekday.parse(obj["weekday"]),
        start_time=obj["start_time"],
        end_time=obj["end_time"],
    ).validate()


def parse_rules(items: Optional[list[dict]]) -> list[WeeklyRule]:
    return [parse_rule(item) for item in items or []]
