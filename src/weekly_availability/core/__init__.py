"""
Availability engine: weekly rule expansion and interval subtraction.
"""

from weekly_availability.core.errors import (
    AvailabilityError,
    InvalidZoneError,
    InvalidTimeFormatError,
    InvalidIntervalError,
    InternalConsistencyError,
)
from weekly_availability.core.ranges import (
    Interval,
    subtract_one,
    subtract_many,
    subtract_many_from_list,
    subtract_busy_time,
    longer_than_or_equal,
    filter_by_minimum_duration,
    local_dates_of,
    group_by_local_date,
)
from weekly_availability.core.timezones import (
    OffsetResolver,
    ZoneInfoOffsetResolver,
    is_valid_timezone,
    validate_timezone,
    zoned_datetime,
)
from weekly_availability.core.weekly import (
    Weekday,
    WeeklyRule,
    index_by_weekday,
    expand_availability,
)

__all__ = [
    "AvailabilityError",
    "InvalidZoneError",
    "InvalidTimeFormatError",
    "InvalidIntervalError",
    "InternalConsistencyError",
    "Interval",
    "subtract_one",
    "subtract_many",
    "subtract_many_from_list",
    "subtract_busy_time",
    "longer_than_or_equal",
    "filter_by_minimum_duration",
    "local_dates_of",
    "group_by_local_date",
    "OffsetResolver",
    "ZoneInfoOffsetResolver",
    "is_valid_timezone",
    "validate_timezone",
    "zoned_datetime",
    "Weekday",
    "WeeklyRule",
    "index_by_weekday",
    "expand_availability",
]
