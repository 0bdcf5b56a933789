"""
Timezone support for availability expansion.

Handles:
- IANA zone catalog lookup and validation
- UTC offset resolution (injectable, so tests can use fixed offsets)
- Civil wall-clock time to absolute instant conversion
"""

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from functools import lru_cache
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, available_timezones

from weekly_availability.core.errors import InvalidTimeFormatError, InvalidZoneError


UTC = dt_timezone.utc

logger = logging.getLogger(__name__)


class OffsetResolver(Protocol):
    """Returns the UTC offset in effect at an instant in a zone."""

    def utc_offset(self, instant: datetime, timezone: str) -> timedelta:
        ...


class ZoneInfoOffsetResolver:
    """Offset resolver backed by the system (or tzdata) IANA database."""

    def utc_offset(self, instant: datetime, timezone: str) -> timedelta:
        validate_timezone(timezone)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        return instant.astimezone(_zone(timezone)).utcoffset()


_default_resolver = ZoneInfoOffsetResolver()


@lru_cache(maxsize=None)
def _zone(timezone: str) -> ZoneInfo:
    return ZoneInfo(timezone)


@lru_cache(maxsize=1)
def get_timezones() -> frozenset[str]:
    """Canonical IANA zone names known to this process."""
    return frozenset(available_timezones())


def is_valid_timezone(timezone: Optional[str]) -> bool:
    """Check zone name against the IANA catalog."""
    return isinstance(timezone, str) and timezone in get_timezones()


def validate_timezone(timezone: Optional[str]) -> str:
    """Return the zone name unchanged, or raise InvalidZoneError."""
    if not is_valid_timezone(timezone):
        raise InvalidZoneError(timezone)
    return timezone


def _parse_naive_utc(civil: str) -> datetime:
    """Read a civil timestamp as if it were UTC, ignoring any offset."""
    try:
        parsed = datetime.fromisoformat(civil.replace("Z", "+00:00"))
    except (TypeError, ValueError, AttributeError):
        raise InvalidTimeFormatError(civil, expected="YYYY-MM-DDTHH:mmZ") from None
    return parsed.replace(tzinfo=UTC)


def zoned_datetime(
    civil: str,
    timezone: str,
    resolver: Optional[OffsetResolver] = None,
) -> datetime:
    """
    Convert a wall-clock timestamp in a zone to an absolute UTC instant.

    The civil string is written as if it were UTC:

        zoned_datetime("2022-10-02T01:00Z", "Australia/Sydney")

    returns the instant when clocks in Sydney showed 2022-10-02 01:00.

    The offset depends on the instant we are looking for, so it is looked
    up twice: once at the naive reading, then again at the instant the
    first offset points to. Within an hour of a DST transition the result
    can still be off by one hour.

    Args:
        civil: 'YYYY-MM-DDTHH:mmZ' (seconds allowed)
        timezone: IANA zone name
        resolver: Offset resolver (zoneinfo by default)

    Returns:
        Timezone-aware datetime in UTC
    """
    resolver = resolver or _default_resolver
    d0 = _parse_naive_utc(civil)
    offset = resolver.utc_offset(d0, timezone)
    better_offset = resolver.utc_offset(d0 - offset, timezone)
    return d0 - better_offset
