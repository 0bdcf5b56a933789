"""
Calendar date helpers for month views.
"""

from datetime import date, datetime, timedelta, timezone


def format_ymd_utc(dt: datetime) -> str:
    """'YYYY-MM-DD' of the instant in UTC."""
    return dt.astimezone(timezone.utc).date().isoformat()


def format_ymd_local(dt: datetime) -> str:
    """'YYYY-MM-DD' of the instant in the process local timezone."""
    return dt.astimezone().date().isoformat()


def start_of_month(d: date, n: int = 0) -> date:
    """First day of the month `n` months after d's month (n may be negative)."""
    months = d.year * 12 + (d.month - 1) + n
    return date(months // 12, months % 12 + 1, 1)


def end_of_month(d: date, n: int = 0) -> date:
    """Last day of the month `n` months after d's month."""
    return start_of_month(d, n + 1) - timedelta(days=1)


def days_of_month(d: date) -> int:
    """Number of days in d's month."""
    return end_of_month(d).day


def parse_month(value: str) -> date:
    """'2025-03' -> date(2025, 3, 1)."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m").date()
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid month: {value!r}. Use YYYY-MM") from None
