"""
Daily record and workout value objects.

Zero means "no sensor reading" in this domain, so every scalar field is
normalised on the way in: zero, negative and non-finite values become
``None``. Downstream code only ever sees a positive number or ``None``.
"""
import math
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from metrics_engine.schemas.enums import MetricField


def positive_or_none(value: Any) -> Optional[float]:
    """Map a raw reading onto the zero-as-absent convention."""
    if value is None:
        return None
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class DailyMetrics(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    date: date

    # Activity
    step_count: Optional[float] = None
    active_calories: Optional[float] = None
    total_calories: Optional[float] = None
    total_distance: Optional[float] = None
    active_minutes: Optional[float] = None

    # Heart & vitals
    resting_heart_rate: Optional[float] = None
    hrv: Optional[float] = None
    vo2_max: Optional[float] = None
    blood_oxygen: Optional[float] = None
    respiratory_rate: Optional[float] = None

    # Sleep
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[float] = None
    deep_sleep_hours: Optional[float] = None
    rem_sleep_hours: Optional[float] = None
    time_in_bed: Optional[float] = None

    # Subjective & derived
    stress_level: Optional[float] = None
    energy_level: Optional[float] = None
    recovery_score: Optional[float] = None

    # Body
    body_fat_percentage: Optional[float] = None
    hydration_level: Optional[float] = None

    @field_validator(*[f.value for f in MetricField], mode="before")
    @classmethod
    def _zero_is_absent(cls, value: Any) -> Optional[float]:
        return positive_or_none(value)

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value

    def value(self, field: MetricField) -> Optional[float]:
        return getattr(self, field.value)


class WorkoutRecord(BaseModel):
    """A completed exercise session. Read-only input."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    workout_type: str
    start_time: datetime
    duration_minutes: float = Field(..., ge=0)
    distance_km: Optional[float] = Field(None, ge=0)
    calories: Optional[float] = Field(None, ge=0)
    avg_heart_rate: Optional[int] = Field(None, ge=0, le=250)
    max_heart_rate: Optional[int] = Field(None, ge=0, le=250)
    perceived_exertion: Optional[int] = Field(None, ge=0, le=10)

    @property
    def day(self) -> date:
        return self.start_time.date()
