"""Weekly workout summary and the active-day flag."""
from datetime import date, timedelta
from statistics import mean
from typing import Iterable, Optional

from metrics_engine.schemas.context import WorkoutSummary
from metrics_engine.schemas.metrics import DailyMetrics, WorkoutRecord


def summarize_workouts(
    workouts: Iterable[WorkoutRecord],
    as_of: date,
    days: int = 7,
) -> WorkoutSummary:
    """Totals over workouts started within the ``days`` calendar days ending on ``as_of``."""
    start = as_of - timedelta(days=days - 1)
    selected = [w for w in workouts if start <= w.day <= as_of]

    heart_rates = [w.avg_heart_rate for w in selected if w.avg_heart_rate]
    return WorkoutSummary(
        start=start,
        end=as_of,
        count=len(selected),
        total_minutes=sum(w.duration_minutes for w in selected),
        total_calories=sum(w.calories or 0.0 for w in selected),
        total_distance_km=sum(w.distance_km or 0.0 for w in selected),
        avg_heart_rate=mean(heart_rates) if heart_rates else None,
        workout_today=any(w.day == as_of for w in selected),
    )


def is_active_day(
    record: Optional[DailyMetrics],
    summary: WorkoutSummary,
    step_goal: float,
) -> bool:
    """A day counts as active when the step goal is met or a workout was logged."""
    if summary.workout_today:
        return True
    steps = record.step_count if record else None
    return steps is not None and steps >= step_goal
