"""
Availability engine errors.

Every error carries a machine-readable code so tool responses can return it
as a structured dict instead of a plain text failure.
"""

from typing import Optional


class AvailabilityError(ValueError):
    """Base class for availability engine errors."""

    code = "availability_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for tool responses."""
        return {
            "error": self.code,
            "message": self.message,
        }


class InvalidZoneError(AvailabilityError):
    """Timezone identifier is not in the IANA zone catalog."""

    code = "invalid_timezone"

    def __init__(self, timezone: Optional[str]):
        self.timezone = timezone
        super().__init__(f"Invalid timezone: {timezone!r}. Use IANA format, e.g. 'Europe/London'")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "timezone": self.timezone}


class InvalidTimeFormatError(AvailabilityError):
    """Time-of-day or datetime string could not be parsed."""

    code = "invalid_time_format"

    def __init__(self, value, expected: str = "HH:mm"):
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid time {value!r}, expected {expected}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "value": str(self.value), "expected": self.expected}


class InternalConsistencyError(AvailabilityError):
    """
    Interval pair fell through every subtraction case.

    Means an inverted or otherwise malformed interval reached the engine.
    Never recovered from: callers get the exception, not a partial result.
    """

    code = "internal_consistency"


class InvalidIntervalError(AvailabilityError):
    """Interval input ends before it starts."""

    code = "invalid_interval"

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"Invalid interval: end {end} is before start {start}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "start": str(self.start), "end": str(self.end)}
