"""
Interval algebra for availability.

Handles:
- Interval value type
- Subtracting busy intervals from available intervals
- Minimum duration filtering
- Bucketing intervals by local calendar date
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Iterable, Optional, Sequence

from weekly_availability.core.dates import format_ymd_local
from weekly_availability.core.errors import InternalConsistencyError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    """Span between two absolute instants. Empty when end <= start; never built inverted from input."""
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def to_dict(self, tz: Optional[tzinfo] = None) -> dict:
        """ISO start/end, converted to tz when given."""
        start, end = self.start, self.end
        if tz is not None:
            start, end = start.astimezone(tz), end.astimezone(tz)
        return {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "duration_minutes": int(self.duration.total_seconds() // 60),
        }


def subtract_one(source: Interval, subtract: Interval) -> list[Interval]:
    """
    Remove one interval from another.

    Returns 0, 1 or 2 intervals. Touching boundaries do not overlap.

    Raises:
        InternalConsistencyError: Pair matches none of the cases
            (inverted or degenerate interval upstream)
    """
    if subtract.end <= source.start:
        # subtract is entirely before source
        return [source]
    elif source.end <= subtract.start:
        # subtract is entirely after source
        return [source]
    elif subtract.start <= source.start and source.end <= subtract.end:
        return []
    elif subtract.start <= source.start and subtract.end < source.end:
        # head removed
        return [Interval(subtract.end, source.end)]
    elif source.start < subtract.start and source.end <= subtract.end:
        # tail removed
        return [Interval(source.start, subtract.start)]
    elif source.start < subtract.start and subtract.end < source.end:
        # split in two
        return [Interval(source.start, subtract.start), Interval(subtract.end, source.end)]

    logger.error(f"Unhandled interval pair: source={source}, subtract={subtract}")
    raise InternalConsistencyError(f"Cannot subtract {subtract} from {source}")


def subtract_many(source: Interval, subtracts: Sequence[Interval]) -> list[Interval]:
    """
    Remove any number of (possibly overlapping, unordered) intervals from one interval.

    Subtrahends are applied in sequence. When one splits the current piece,
    the remaining subtrahends are applied to each half separately, left half
    first. Work items are (piece, index of next subtrahend) pairs, so the
    subtrahend list is never copied.

    Returns:
        Disjoint pieces of source, ascending by start
    """
    result: list[Interval] = []
    # LIFO: push right before left so the left half is finished first
    stack: list[tuple[Interval, int]] = [(source, 0)]
    total = len(subtracts)

    while stack:
        piece, index = stack.pop()
        while index < total:
            parts = subtract_one(piece, subtracts[index])
            index += 1
            if not parts:
                piece = None
                break
            if len(parts) == 2:
                stack.append((parts[1], index))
                stack.append((parts[0], index))
                piece = None
                break
            piece = parts[0]
        if piece is not None:
            result.append(piece)

    return result


def subtract_many_from_list(
    sources: Iterable[Interval],
    subtracts: Sequence[Interval],
) -> list[Interval]:
    """
    Subtract busy intervals from every available interval.

    Sources are assumed to be pairwise disjoint.
    """
    subtracts = list(subtracts)
    result = []
    for source in sources:
        result.extend(subtract_many(source, subtracts))
    logger.debug(f"Subtracted {len(subtracts)} busy intervals, {len(result)} free intervals remain")
    return result


subtract_busy_time = subtract_many_from_list


def longer_than_or_equal(duration: timedelta) -> Callable[[Interval], bool]:
    """Predicate: interval lasts at least `duration`."""
    def predicate(interval: Interval) -> bool:
        return interval.end - interval.start >= duration
    return predicate


def filter_by_minimum_duration(
    intervals: Iterable[Interval],
    min_duration: timedelta,
) -> list[Interval]:
    """Drop intervals shorter than min_duration."""
    return list(filter(longer_than_or_equal(min_duration), intervals))


def local_dates_of(interval: Interval) -> set[str]:
    """
    Local calendar dates ('YYYY-MM-DD') the interval starts and ends on.

    Uses the process local timezone. Intervals are assumed shorter than
    24 hours, so checking start and end is enough.
    """
    return {
        format_ymd_local(interval.start),
        format_ymd_local(interval.end),
    }


def group_by_local_date(intervals: Iterable[Interval]) -> dict[str, list[Interval]]:
    """
    Map 'YYYY-MM-DD' (process local time) to the intervals touching that date.

    An interval crossing local midnight appears under both dates.
    """
    grouped: dict[str, list[Interval]] = {}
    for interval in intervals:
        for day in sorted(local_dates_of(interval)):
            grouped.setdefault(day, []).append(interval)
    return grouped
