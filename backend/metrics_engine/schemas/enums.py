from enum import Enum


class MetricField(str, Enum):
    """Scalar fields of a daily record, by attribute name."""
    STEP_COUNT = "step_count"
    ACTIVE_CALORIES = "active_calories"
    TOTAL_CALORIES = "total_calories"
    TOTAL_DISTANCE = "total_distance"
    ACTIVE_MINUTES = "active_minutes"
    RESTING_HEART_RATE = "resting_heart_rate"
    HRV = "hrv"
    VO2_MAX = "vo2_max"
    BLOOD_OXYGEN = "blood_oxygen"
    RESPIRATORY_RATE = "respiratory_rate"
    SLEEP_HOURS = "sleep_hours"
    SLEEP_QUALITY = "sleep_quality"
    DEEP_SLEEP_HOURS = "deep_sleep_hours"
    REM_SLEEP_HOURS = "rem_sleep_hours"
    TIME_IN_BED = "time_in_bed"
    STRESS_LEVEL = "stress_level"
    ENERGY_LEVEL = "energy_level"
    RECOVERY_SCORE = "recovery_score"
    BODY_FAT_PERCENTAGE = "body_fat_percentage"
    HYDRATION_LEVEL = "hydration_level"


class MetricKind(str, Enum):
    """Metrics that get a detail context on the dashboard."""
    RESTING_HEART_RATE = "resting_heart_rate"
    HRV = "hrv"
    VO2_MAX = "vo2_max"
    BLOOD_OXYGEN = "blood_oxygen"
    RESPIRATORY_RATE = "respiratory_rate"
    RECOVERY = "recovery"
    STEPS = "steps"
    ACTIVE_CALORIES = "active_calories"
    TOTAL_CALORIES = "total_calories"
    SLEEP = "sleep"
    SLEEP_QUALITY = "sleep_quality"
    BODY_FAT = "body_fat"
    HYDRATION = "hydration"


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class AnnotationKind(str, Enum):
    NEW_HIGH = "new_high"
    NEW_LOW = "new_low"
    LATEST = "latest"


class ActivityWeightPreset(str, Enum):
    BALANCED = "balanced"  # steps 50 / calories 50
    STEPS_WEIGHTED = "steps_weighted"  # steps 60 / calories 40


# Zone label returned for absent or non-positive readings
NO_DATA = "No data"

# (steps weight, calories weight) per preset
ACTIVITY_WEIGHT_PRESETS: dict[ActivityWeightPreset, tuple[float, float]] = {
    ActivityWeightPreset.BALANCED: (50.0, 50.0),
    ActivityWeightPreset.STEPS_WEIGHTED: (60.0, 40.0),
}
