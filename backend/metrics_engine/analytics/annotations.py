"""Annotations for the latest value in a series."""

from metrics_engine.analytics.trends import Series, series_values
from metrics_engine.schemas.context import Annotation
from metrics_engine.schemas.enums import AnnotationKind


def format_reading(value: float, unit: str = "") -> str:
    text = f"{value:.1f}"
    return f"{text} {unit}" if unit else text


def annotate(series: Series, unit: str = "") -> list[Annotation]:
    """
    Flag the latest value as a new high, a new low, or neither.

    A flat series (a single sample, or every sample equal) is both its own
    maximum and minimum; it gets one neutral "Latest" badge instead of two.
    """
    values = series_values(series)
    if not values:
        return []

    latest = values[-1]
    highest, lowest = max(values), min(values)

    if highest == lowest:
        return [Annotation(kind=AnnotationKind.LATEST, title="Latest", detail=format_reading(latest, unit))]
    if latest == highest:
        return [Annotation(kind=AnnotationKind.NEW_HIGH, title="New High", detail="Best value in the window")]
    if latest == lowest:
        return [Annotation(kind=AnnotationKind.NEW_LOW, title="New Low", detail="Lowest value recently")]
    return [
        Annotation(
            kind=AnnotationKind.LATEST,
            title=f"Latest: {format_reading(latest, unit)}",
            detail=f"{format_reading(latest, unit)} today",
        )
    ]


class AnnotationGenerator:
    def annotate(self, series: Series, unit: str = "") -> list[Annotation]:
        return annotate(series, unit)
