"""
Recurring weekly availability.

A weekly rule is a local wall-clock window on one weekday, e.g. MON 09:00-17:00
in Europe/London. Expanding rules over a date window yields the absolute
intervals the person is available.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Iterable, Optional, Union

from weekly_availability.core.dates import format_ymd_utc
from weekly_availability.core.errors import InvalidTimeFormatError
from weekly_availability.core.ranges import Interval
from weekly_availability.core.timezones import (
    UTC,
    OffsetResolver,
    validate_timezone,
    zoned_datetime,
)


logger = logging.getLogger(__name__)

MIN = 60
HOUR = 60 * MIN

# Days added on each side of the query window. A rule anchored on one UTC
# date can land on the neighbouring date once the zone offset is applied.
EXPANSION_MARGIN = timedelta(days=2)

RE_HOUR_MINUTE = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])")


class Weekday(IntEnum):
    """Days of the week, Sunday first."""
    SUN = 0
    MON = 1
    TUE = 2
    WED = 3
    THU = 4
    FRI = 5
    SAT = 6

    @classmethod
    def of(cls, d: datetime) -> "Weekday":
        """Weekday of a date/datetime (as given, no zone conversion)."""
        # date.weekday() is Monday=0
        return cls((d.weekday() + 1) % 7)

    @classmethod
    def parse(cls, value: Union[str, int, "Weekday"]) -> "Weekday":
        """Accept 'MON', 'mon', 1 or Weekday.MON."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            pass
        elif isinstance(value, int):
            if 0 <= value <= 6:
                return cls(value)
        elif isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ValueError(
            f"Invalid weekday: {value!r}. Use one of: {', '.join(d.name for d in cls)}"
        )


def is_valid_hour_minute(hour_minute: str) -> bool:
    """Check 'HH:mm' format, 00:00-23:59."""
    return hour_minute_to_seconds(hour_minute) is not None


def hour_minute_to_seconds(hour_minute: str) -> Optional[int]:
    """'09:30' -> 34200. None if not HH:mm."""
    if not isinstance(hour_minute, str):
        return None
    match = RE_HOUR_MINUTE.fullmatch(hour_minute)
    if not match:
        return None
    h, m = match.groups()
    return int(h) * HOUR + int(m) * MIN


@dataclass(frozen=True)
class WeeklyRule:
    """Recurring local-time window on one weekday. Times are 'HH:mm'."""
    weekday: Weekday
    start_time: str
    end_time: str

    def validate(self) -> "WeeklyRule":
        for value in (self.start_time, self.end_time):
            if not is_valid_hour_minute(value):
                raise InvalidTimeFormatError(value)
        return self


def index_by_weekday(rules: Iterable[WeeklyRule]) -> dict[Weekday, list[WeeklyRule]]:
    """Group rules by weekday. Every weekday is present; input order is kept."""
    index: dict[Weekday, list[WeeklyRule]] = {day: [] for day in Weekday}
    for rule in rules:
        index[rule.weekday].append(rule)
    return index


def rule_to_interval(
    day: str,
    rule: WeeklyRule,
    timezone: str,
    resolver: Optional[OffsetResolver] = None,
) -> Interval:
    """Resolve a rule on a given 'YYYY-MM-DD' to an absolute interval."""
    return Interval(
        start=zoned_datetime(f"{day}T{rule.start_time}Z", timezone, resolver),
        end=zoned_datetime(f"{day}T{rule.end_time}Z", timezone, resolver),
    )


def expand_availability(
    window_start: datetime,
    window_end: datetime,
    rules: Iterable[WeeklyRule],
    timezone: str,
    resolver: Optional[OffsetResolver] = None,
) -> list[Interval]:
    """
    Expand weekly rules into absolute intervals overlapping a window.

    Walks every UTC calendar day from two days before window_start to two
    days after window_end, resolves each matching rule in the zone and keeps
    the results overlapping [window_start, window_end).

    Args:
        window_start: Window start (timezone-aware)
        window_end: Window end (timezone-aware)
        rules: Weekly rules
        timezone: IANA zone the rule times are written in
        resolver: Offset resolver (zoneinfo by default)

    Returns:
        Intervals ordered by day, then by rule order. Overlapping rules are
        not merged. Empty when window_start >= window_end.

    Raises:
        InvalidZoneError: Unknown timezone
        InvalidTimeFormatError: Rule time not in HH:mm format
        ValueError: Naive window_start or window_end
    """
    validate_timezone(timezone)
    rules = [rule.validate() for rule in rules]

    if window_start.tzinfo is None or window_end.tzinfo is None:
        raise ValueError("window_start and window_end must be timezone-aware")

    if window_start >= window_end:
        return []

    index = index_by_weekday(rules)
    cursor = (window_start - EXPANSION_MARGIN).astimezone(UTC)
    end_with_margin = window_end + EXPANSION_MARGIN
    result = []

    while cursor <= end_with_margin:
        day = format_ymd_utc(cursor)
        for rule in index[Weekday.of(cursor)]:
            candidate = rule_to_interval(day, rule, timezone, resolver)
            if candidate.end > window_start and candidate.start < window_end:
                result.append(candidate)
        cursor += timedelta(days=1)

    logger.debug(
        f"Expanded {len(rules)} weekly rules in {timezone} over "
        f"{window_start.isoformat()}..{window_end.isoformat()}: {len(result)} intervals"
    )
    return result
