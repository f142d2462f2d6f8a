"""
Presentation-ready value objects.

Everything here is immutable, carries no behaviour beyond simple accessors,
and serialises to JSON for the view layer.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from metrics_engine.schemas.enums import AnnotationKind, MetricField, MetricKind, TrendDirection


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SeriesPoint(_Frozen):
    date: date
    value: float


class MetricSeries(_Frozen):
    """Present values of one field over the last N days, oldest first."""
    field: MetricField
    days: int = Field(..., ge=1)
    as_of: date
    points: tuple[SeriesPoint, ...] = ()

    @property
    def values(self) -> list[float]:
        return [p.value for p in self.points]

    def __len__(self) -> int:
        return len(self.points)


class Annotation(_Frozen):
    kind: AnnotationKind
    title: str
    detail: str = ""


class DailyBreakdownEntry(_Frozen):
    date: date
    value: float
    label: str
    delta_percent: Optional[float] = None  # vs. the previous calendar day


class MetricContext(_Frozen):
    kind: MetricKind
    title: str
    primary_value: str
    unit: str
    description: str
    trend_series: tuple[SeriesPoint, ...] = ()
    window_days: int
    average: float = 0.0
    weekly_average_label: str
    daily_breakdown: tuple[DailyBreakdownEntry, ...] = ()
    guidance: tuple[str, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    zone: Optional[str] = None
    trend_percent: float = 0.0
    trend_direction: TrendDirection = TrendDirection.STABLE
    window_trend_percent: float = 0.0  # newest days vs. oldest days of the window


class CompositeScores(_Frozen):
    """All day-level composite scores, each in [0, 100]."""
    health: int = Field(..., ge=0, le=100)
    readiness: int = Field(..., ge=0, le=100)
    activity: int = Field(..., ge=0, le=100)
    sleep: int = Field(..., ge=0, le=100)
    recovery: int = Field(..., ge=0, le=100)
    heart: int = Field(..., ge=0, le=100)
    sleep_architecture: int = Field(..., ge=0, le=100)
    stress: int = Field(..., ge=0, le=100)
    overall: int = Field(..., ge=0, le=100)
    breakdowns: dict[str, dict[str, float]] = Field(default_factory=dict)


class WorkoutSummary(_Frozen):
    start: date
    end: date
    count: int = 0
    total_minutes: float = 0.0
    total_calories: float = 0.0
    total_distance_km: float = 0.0
    avg_heart_rate: Optional[float] = None
    workout_today: bool = False


class DashboardSnapshot(_Frozen):
    as_of: date
    scores: CompositeScores
    score_labels: dict[str, str]
    stress_label: str
    contexts: dict[MetricKind, MetricContext]
    zones: dict[MetricKind, Optional[str]]
    trends: dict[MetricKind, float]
    workouts: WorkoutSummary
    active_day: bool = False


class ScoresResponse(_Frozen):
    as_of: date
    scores: CompositeScores
    labels: dict[str, str]
    stress_label: str
