"""
Engine exceptions.

Every data condition (no data, a single sample, a zero prior value) has a
defined fallback value, so only programmer errors and storage failures are
raised. Each error carries a machine-readable ``code``.
"""
from datetime import date
from typing import Any, Optional


class MetricsEngineError(Exception):
    """Base class for all engine errors."""
    code: str = "METRICS_ENGINE_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidWindow(MetricsEngineError):
    """A window of N <= 0 days, or a range whose start is after its end."""
    code = "INVALID_WINDOW"

    @classmethod
    def for_length(cls, days: int) -> "InvalidWindow":
        return cls(
            f"Window length must be positive, got {days}.",
            details={"days": days},
        )

    @classmethod
    def before_calendar_start(cls, as_of: date, days: int) -> "InvalidWindow":
        return cls(
            f"A {days}-day window ending {as_of} starts before the first representable date.",
            details={"days": days, "as_of": as_of.isoformat()},
        )

    @classmethod
    def for_range(cls, start: date, end: date) -> "InvalidWindow":
        return cls(
            f"Range start {start} is after end {end}.",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )


class StoreUnavailable(MetricsEngineError):
    """The daily metrics store could not be read. Not retried by the engine."""
    code = "STORE_UNAVAILABLE"
