"""
MetricContext Builder - Assembles one metric's presentation bundle.

The builder only reads: it samples the store through the WindowSampler,
classifies, computes trends and annotations, and returns an immutable
MetricContext. Two calls against an unchanged store return equal values.
"""
import logging
from datetime import date, timedelta
from statistics import mean
from typing import Optional

from metrics_engine.analytics.annotations import AnnotationGenerator
from metrics_engine.analytics.trends import TrendCalculator, percent_change
from metrics_engine.analytics.window import WindowSampler
from metrics_engine.schemas.context import DailyBreakdownEntry, MetricContext, MetricSeries
from metrics_engine.schemas.enums import MetricKind
from metrics_engine.schemas.metrics import DailyMetrics
from metrics_engine.services.metric_catalog import METRIC_CATALOG, MetricDefinition
from metrics_engine.services.scoring_config import ScoringConfig
from metrics_engine.services.zones import ZoneClassifier

logger = logging.getLogger(__name__)


class MetricContextBuilder:
    """Builds MetricContext bundles for any kind in the catalog."""

    def __init__(
        self,
        sampler: WindowSampler,
        zones: Optional[ZoneClassifier] = None,
        trends: Optional[TrendCalculator] = None,
        annotations: Optional[AnnotationGenerator] = None,
        config: Optional[ScoringConfig] = None,
        catalog: Optional[dict[MetricKind, MetricDefinition]] = None,
    ):
        self.config = config or ScoringConfig()
        self.sampler = sampler
        self.zones = zones or ZoneClassifier()
        self.trends = trends or TrendCalculator(self.config.trend)
        self.annotations = annotations or AnnotationGenerator()
        self.catalog = catalog or METRIC_CATALOG

    def definition(self, kind: MetricKind) -> MetricDefinition:
        return self.catalog[kind]

    def build(
        self,
        kind: MetricKind,
        as_of: date,
        current: Optional[DailyMetrics] = None,
    ) -> MetricContext:
        """
        Build the context for ``kind`` on ``as_of``.

        ``current`` is the day's record; when omitted it is read from the
        store. An absent record or reading shows as a zero primary value.
        """
        definition = self.definition(kind)
        if current is None:
            current = self.sampler.store.get(as_of)
        current_value = current.value(definition.field) if current else None

        window_days = definition.window_days(self.config.window)
        series = self.sampler.sample(definition.field, window_days, as_of)
        values = series.values
        average = mean(values) if values else 0.0

        zone = None
        if self.zones.has_table(kind):
            zone = self.zones.classify(kind, current_value)

        trend_percent = self.trends.percent_trend(series, invert=definition.invert)

        return MetricContext(
            kind=kind,
            title=definition.title,
            primary_value=definition.format_value(current_value),
            unit=definition.unit,
            description=definition.description,
            trend_series=series.points,
            window_days=window_days,
            average=average,
            weekly_average_label=definition.average_format.format(average=average),
            daily_breakdown=tuple(self.daily_breakdown(definition, as_of)),
            guidance=definition.guidance,
            annotations=tuple(self.annotations.annotate(series, definition.badge_unit)),
            zone=zone,
            trend_percent=trend_percent,
            trend_direction=self.trends.direction(trend_percent),
            window_trend_percent=self.trends.window_trend(series, invert=definition.invert),
        )

    def daily_breakdown(self, definition: MetricDefinition, as_of: date) -> list[DailyBreakdownEntry]:
        """
        Present days among the last ``breakdown_days``, oldest first.

        Each entry's delta compares it with the calendar day right before it,
        so a day whose predecessor has no reading has no delta.
        """
        days = self.config.window.breakdown_days
        # One extra day so the oldest entry has a predecessor to compare with
        series: MetricSeries = self.sampler.sample(definition.field, days + 1, as_of)
        by_day = {point.date: point.value for point in series.points}
        first_day = as_of - timedelta(days=days - 1)

        entries = []
        for point in series.points:
            if point.date < first_day:
                continue
            previous = by_day.get(point.date - timedelta(days=1))
            entries.append(
                DailyBreakdownEntry(
                    date=point.date,
                    value=point.value,
                    label=definition.format_with_unit(point.value),
                    delta_percent=percent_change(previous, point.value),
                )
            )
        return entries
