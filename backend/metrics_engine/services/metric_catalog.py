"""
Per-metric presentation definitions.

Each definition names the record field it reads, how its value is printed,
whether lower readings are the improvement, and the copy shown beside it.
"""
from dataclasses import dataclass
from typing import Optional

from metrics_engine.schemas.enums import MetricField, MetricKind
from metrics_engine.services.scoring_config import WindowConfig


@dataclass(frozen=True)
class MetricDefinition:
    kind: MetricKind
    field: MetricField
    title: str
    unit: str
    description: str
    average_format: str  # str.format template with an ``average`` placeholder
    guidance: tuple[str, ...] = ()
    precision: int = 0  # decimals in the primary value
    invert: bool = False  # lower is better
    slow_changing: bool = False  # sampled over the long window
    annotation_unit: Optional[str] = None  # defaults to ``unit``

    def window_days(self, config: WindowConfig) -> int:
        return config.vo2_max_days if self.slow_changing else config.default_days

    def format_value(self, value: Optional[float]) -> str:
        return f"{(value or 0.0):.{self.precision}f}"

    def format_with_unit(self, value: Optional[float]) -> str:
        text = self.format_value(value)
        return f"{text} {self.unit}" if self.unit else text

    @property
    def badge_unit(self) -> str:
        return self.unit if self.annotation_unit is None else self.annotation_unit


METRIC_CATALOG: dict[MetricKind, MetricDefinition] = {
    MetricKind.RESTING_HEART_RATE: MetricDefinition(
        kind=MetricKind.RESTING_HEART_RATE,
        field=MetricField.RESTING_HEART_RATE,
        title="Resting Heart Rate",
        unit="bpm",
        description="Resting heart rate reflects cardiovascular fitness and recovery status.",
        average_format="Weekly avg • {average:.1f} bpm",
        guidance=(
            "Stay hydrated and well rested to keep RHR in optimal ranges.",
            "Consider active recovery days when RHR trends high.",
        ),
        invert=True,
    ),
    MetricKind.HRV: MetricDefinition(
        kind=MetricKind.HRV,
        field=MetricField.HRV,
        title="Heart Rate Variability",
        unit="ms",
        description="HRV reflects nervous system balance and recovery readiness.",
        average_format="Weekly avg • {average:.0f} ms",
        guidance=(
            "Consistent sleep and stress management improve HRV.",
            "Easy aerobic work raises HRV over time.",
        ),
        precision=1,
    ),
    MetricKind.VO2_MAX: MetricDefinition(
        kind=MetricKind.VO2_MAX,
        field=MetricField.VO2_MAX,
        title="VO₂ Max",
        unit="ml/kg/min",
        description="VO₂ Max measures aerobic capacity and overall fitness.",
        average_format="Rolling avg • {average:.1f}",
        guidance=(
            "Interval training improves VO₂ max.",
            "Recover fully between intense cardio days.",
        ),
        precision=1,
        slow_changing=True,
    ),
    MetricKind.BLOOD_OXYGEN: MetricDefinition(
        kind=MetricKind.BLOOD_OXYGEN,
        field=MetricField.BLOOD_OXYGEN,
        title="Blood Oxygen",
        unit="%",
        description="Blood oxygen saturation indicates how efficiently your body distributes oxygen.",
        average_format="Avg saturation • {average:.1f}%",
        guidance=(
            "Maintain nasal breathing during easy efforts.",
            "If saturation dips persistently, consult a clinician.",
        ),
        precision=1,
    ),
    MetricKind.RESPIRATORY_RATE: MetricDefinition(
        kind=MetricKind.RESPIRATORY_RATE,
        field=MetricField.RESPIRATORY_RATE,
        title="Respiratory Rate",
        unit="rpm",
        description="Breaths per minute captured during sleep and at rest.",
        average_format="Avg rate • {average:.1f}",
        guidance=(
            "Practice diaphragm breathing to lower rate.",
            "Extra rest when rate trends high.",
        ),
        invert=True,
    ),
    MetricKind.RECOVERY: MetricDefinition(
        kind=MetricKind.RECOVERY,
        field=MetricField.RECOVERY_SCORE,
        title="Recovery",
        unit="/100",
        description="Recovery score blends HRV, resting HR, and subjective energy.",
        average_format="Avg recovery • {average:.0f}",
        guidance=(
            "Low recovery? Focus on sleep and easy sessions.",
            "Add mobility or meditation on high stress days.",
        ),
        annotation_unit="",
    ),
    MetricKind.STEPS: MetricDefinition(
        kind=MetricKind.STEPS,
        field=MetricField.STEP_COUNT,
        title="Steps",
        unit="steps",
        description="Daily step count across all tracked movement.",
        average_format="Weekly avg • {average:,.0f} steps",
        guidance=(
            "Short walks after meals add up quickly.",
            "Aim for 10,000 steps on most days.",
        ),
    ),
    MetricKind.ACTIVE_CALORIES: MetricDefinition(
        kind=MetricKind.ACTIVE_CALORIES,
        field=MetricField.ACTIVE_CALORIES,
        title="Active Calories",
        unit="kcal",
        description="Energy burned through movement and exercise.",
        average_format="Weekly avg • {average:.0f} kcal",
        guidance=("Mix steady cardio with strength work to raise daily burn.",),
    ),
    MetricKind.TOTAL_CALORIES: MetricDefinition(
        kind=MetricKind.TOTAL_CALORIES,
        field=MetricField.TOTAL_CALORIES,
        title="Total Calories",
        unit="kcal",
        description="Active plus resting energy expenditure.",
        average_format="Weekly avg • {average:.0f} kcal",
        guidance=("Match intake to expenditure to hold weight steady.",),
    ),
    MetricKind.SLEEP: MetricDefinition(
        kind=MetricKind.SLEEP,
        field=MetricField.SLEEP_HOURS,
        title="Sleep",
        unit="h",
        description="Total time asleep across all sleep stages.",
        average_format="Weekly avg • {average:.1f} h",
        guidance=(
            "Try to get 7-9 hours of sleep nightly.",
            "Keep a consistent bedtime routine.",
        ),
        precision=1,
    ),
    MetricKind.SLEEP_QUALITY: MetricDefinition(
        kind=MetricKind.SLEEP_QUALITY,
        field=MetricField.SLEEP_QUALITY,
        title="Sleep Quality",
        unit="/10",
        description="Sleep quality rated from duration, efficiency and stage balance.",
        average_format="Weekly avg • {average:.1f}/10",
        guidance=("Optimize your sleep environment: dark, cool and quiet.",),
        annotation_unit="",
    ),
    MetricKind.BODY_FAT: MetricDefinition(
        kind=MetricKind.BODY_FAT,
        field=MetricField.BODY_FAT_PERCENTAGE,
        title="Body Fat",
        unit="%",
        description="Estimated body fat percentage from your smart scale.",
        average_format="Avg • {average:.1f}%",
        guidance=(
            "Strength training preserves lean mass while losing fat.",
            "Weigh in at the same time of day for consistent readings.",
        ),
        precision=1,
        invert=True,
    ),
    MetricKind.HYDRATION: MetricDefinition(
        kind=MetricKind.HYDRATION,
        field=MetricField.HYDRATION_LEVEL,
        title="Hydration",
        unit="L",
        description="Water logged throughout the day.",
        average_format="Weekly avg • {average:.1f} L",
        guidance=("Drink water consistently throughout the day.",),
        precision=1,
    ),
}
