"""
Zone Classifier - Maps a raw reading onto a named band.

Bands are half-open intervals [lower, upper) laid end to end, the last one
open-ended. A value sitting exactly on a boundary therefore belongs to the
higher band: a resting heart rate of 70 bpm is "Good", not "Excellent".
"""
import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional, Sequence

from metrics_engine.schemas.context import CompositeScores
from metrics_engine.schemas.enums import NO_DATA, MetricKind


@dataclass(frozen=True)
class Band:
    lower: float
    upper: float  # exclusive; math.inf for the last band
    label: str

    def contains(self, value: float) -> bool:
        return self.lower <= value < self.upper


class BandTable:
    """Ordered, contiguous bands for one metric."""

    def __init__(self, breakpoints: Sequence[float], labels: Sequence[str]):
        if len(labels) != len(breakpoints) + 1:
            raise ValueError("A band table needs exactly one more label than breakpoints")
        if any(b >= a for a, b in zip(breakpoints[1:], breakpoints)):
            raise ValueError("Breakpoints must be strictly increasing")

        lowers = [0.0, *breakpoints]
        uppers = [*breakpoints, math.inf]
        self.bands = tuple(Band(lo, hi, label) for lo, hi, label in zip(lowers, uppers, labels))
        self._lowers = lowers

    def label_for(self, value: float) -> str:
        index = max(bisect_right(self._lowers, value) - 1, 0)
        return self.bands[index].label


# Lower is better
RESTING_HEART_RATE_BANDS = BandTable([60, 70, 80, 90], ["Athletic", "Excellent", "Good", "Fair", "High"])
RESPIRATORY_RATE_BANDS = BandTable([12, 20, 30], ["Low", "Normal", "High", "Very high"])

# Higher is better
HRV_BANDS = BandTable([20, 50, 100], ["Low", "Average", "Good", "Excellent"])
VO2_MAX_BANDS = BandTable([30, 40, 50, 60], ["Poor", "Fair", "Good", "Excellent", "Superior"])
RECOVERY_BANDS = BandTable([20, 40, 60, 80], ["Critical", "Poor", "Fair", "Good", "Excellent"])
SLEEP_QUALITY_BANDS = BandTable([2, 4, 6, 8], ["Very Poor", "Poor", "Fair", "Good", "Excellent"])
STEPS_BANDS = BandTable([5000, 8000, 10000], ["Sedentary", "Lightly Active", "Active", "Very Active"])

# Centered: too little and too much are both flagged
SLEEP_DURATION_BANDS = BandTable([5, 6, 8, 9], ["Poor", "Fair", "Good", "Excellent", "Too much"])

# Saturation is capped near 100%, so only the low side has warning bands
BLOOD_OXYGEN_BANDS = BandTable([90, 95], ["Critical", "Low", "Normal"])

# Composite 0-100 scores, where 0 is a real value rather than "no data"
SCORE_BANDS = BandTable([50, 70, 85], ["Needs Attention", "Fair", "Good", "Excellent"])
STRESS_BANDS = BandTable([26, 51, 71, 86], ["Calm", "Relaxed", "Moderate", "Elevated", "High"])


DEFAULT_ZONE_TABLES: dict[MetricKind, BandTable] = {
    MetricKind.RESTING_HEART_RATE: RESTING_HEART_RATE_BANDS,
    MetricKind.HRV: HRV_BANDS,
    MetricKind.VO2_MAX: VO2_MAX_BANDS,
    MetricKind.BLOOD_OXYGEN: BLOOD_OXYGEN_BANDS,
    MetricKind.RESPIRATORY_RATE: RESPIRATORY_RATE_BANDS,
    MetricKind.RECOVERY: RECOVERY_BANDS,
    MetricKind.SLEEP: SLEEP_DURATION_BANDS,
    MetricKind.SLEEP_QUALITY: SLEEP_QUALITY_BANDS,
    MetricKind.STEPS: STEPS_BANDS,
}


class ZoneClassifier:
    """Classifies readings against per-metric band tables."""

    def __init__(self, tables: Optional[dict[MetricKind, BandTable]] = None):
        self.tables = dict(DEFAULT_ZONE_TABLES if tables is None else tables)

    def has_table(self, kind: MetricKind) -> bool:
        return kind in self.tables

    def classify(self, kind: MetricKind, value: Optional[float]) -> str:
        """Return the zone label for ``value``, or "No data" when absent."""
        table = self.tables.get(kind)
        if table is None:
            raise ValueError(f"No zone table for metric {kind.value!r}")
        if value is None or not math.isfinite(value) or value <= 0:
            return NO_DATA
        return table.label_for(value)


def score_label(score: float) -> str:
    """Label for any 0-100 composite score."""
    return SCORE_BANDS.label_for(max(score, 0.0))


def stress_label(stress: float) -> str:
    return STRESS_BANDS.label_for(max(stress, 0.0))


LABELLED_SCORES = ("health", "readiness", "activity", "sleep", "recovery", "heart", "overall")


def score_labels(scores: CompositeScores) -> dict[str, str]:
    """Labels for every labelled composite score; stress has its own scale."""
    return {name: score_label(getattr(scores, name)) for name in LABELLED_SCORES}
