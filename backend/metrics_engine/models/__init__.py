# SQLAlchemy Models
from metrics_engine.models.daily_metrics import DailyMetricsRow
from metrics_engine.models.workout import WorkoutRow

__all__ = [
    "DailyMetricsRow",
    "WorkoutRow",
]
