"""
Metrics Engine - The single entry point the host application calls.

``MetricsEngine`` computes synchronously against any DailyMetricsStore.
Hosts with asynchronous storage call ``compute_snapshot`` (or
``load_engine``), which copies the needed window out of the database once
and then runs the synchronous engine over that copy.
"""
import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from metrics_engine.analytics.annotations import AnnotationGenerator
from metrics_engine.analytics.trends import TrendCalculator
from metrics_engine.analytics.window import WindowSampler, window_start
from metrics_engine.schemas.context import (
    CompositeScores,
    DashboardSnapshot,
    MetricContext,
    MetricSeries,
    WorkoutSummary,
)
from metrics_engine.schemas.enums import MetricField, MetricKind
from metrics_engine.schemas.metrics import DailyMetrics
from metrics_engine.services.context_builder import MetricContextBuilder
from metrics_engine.services.scoring import CompositeScoreCalculator
from metrics_engine.services.scoring_config import ScoringConfig
from metrics_engine.services.store import DailyMetricsStore, SqlAlchemyMetricsStore
from metrics_engine.services.workouts import is_active_day, summarize_workouts
from metrics_engine.services.zones import ZoneClassifier, score_labels, stress_label

logger = logging.getLogger(__name__)


def local_today(timezone: str = "UTC") -> date:
    """Today's calendar day at local midnight in ``timezone``."""
    return datetime.now(ZoneInfo(timezone)).date()


def lookback_days(config: ScoringConfig) -> int:
    """Days of history a full snapshot reads, including the breakdown's extra day."""
    window = config.window
    return max(
        window.default_days,
        window.vo2_max_days,
        window.breakdown_days + 1,
        window.workout_summary_days,
    )


class MetricsEngine:
    """Scores, zones, trends and metric contexts over one store."""

    def __init__(
        self,
        store: DailyMetricsStore,
        config: Optional[ScoringConfig] = None,
        zones: Optional[ZoneClassifier] = None,
        cache_enabled: bool = True,
    ):
        self.store = store
        self.config = config or ScoringConfig()
        self.zones = zones or ZoneClassifier()
        self.sampler = WindowSampler(store, cache_enabled=cache_enabled)
        self.trends = TrendCalculator(self.config.trend)
        self.calculator = CompositeScoreCalculator(self.config)
        self.contexts = MetricContextBuilder(
            self.sampler,
            zones=self.zones,
            trends=self.trends,
            annotations=AnnotationGenerator(),
            config=self.config,
        )

    def record(self, as_of: date) -> DailyMetrics:
        """The day's record, or an empty one when nothing was recorded."""
        return self.store.get(as_of) or DailyMetrics(date=as_of)

    def series(self, field: MetricField, days: int, as_of: date) -> MetricSeries:
        return self.sampler.sample(field, days, as_of)

    def scores(self, as_of: date) -> CompositeScores:
        return self.calculator.score_all(self.record(as_of))

    def context(self, kind: MetricKind, as_of: date) -> MetricContext:
        return self.contexts.build(kind, as_of, current=self.record(as_of))

    def zone(self, kind: MetricKind, as_of: date) -> Optional[str]:
        """Zone label for the day's reading; None for kinds without a band table."""
        if not self.zones.has_table(kind):
            return None
        definition = self.contexts.definition(kind)
        return self.zones.classify(kind, self.record(as_of).value(definition.field))

    def trend(self, kind: MetricKind, as_of: date) -> float:
        definition = self.contexts.definition(kind)
        series = self.sampler.sample(definition.field, definition.window_days(self.config.window), as_of)
        return self.trends.percent_trend(series, invert=definition.invert)

    def workout_summary(self, as_of: date) -> WorkoutSummary:
        days = self.config.window.workout_summary_days
        workouts = self.store.workouts(window_start(as_of, days), as_of)
        return summarize_workouts(workouts, as_of, days=days)

    def snapshot(self, as_of: date) -> DashboardSnapshot:
        """Every score, context, zone and trend for ``as_of`` in one value."""
        record = self.record(as_of)
        scores = self.calculator.score_all(record)
        contexts = {kind: self.contexts.build(kind, as_of, current=record) for kind in self.contexts.catalog}
        workouts = self.workout_summary(as_of)

        snapshot = DashboardSnapshot(
            as_of=as_of,
            scores=scores,
            score_labels=score_labels(scores),
            stress_label=stress_label(scores.stress),
            contexts=contexts,
            zones={kind: ctx.zone for kind, ctx in contexts.items()},
            trends={kind: ctx.trend_percent for kind, ctx in contexts.items()},
            workouts=workouts,
            active_day=is_active_day(record, workouts, self.config.activity.step_goal),
        )
        logger.info(
            "Dashboard snapshot computed",
            extra={"as_of": as_of.isoformat(), "overall": scores.overall, "workouts": workouts.count},
        )
        return snapshot


async def load_engine(
    store: SqlAlchemyMetricsStore,
    as_of: date,
    config: Optional[ScoringConfig] = None,
    zones: Optional[ZoneClassifier] = None,
    cache_enabled: bool = True,
) -> MetricsEngine:
    """Copy the lookback window ending on ``as_of`` out of the database into an engine."""
    config = config or ScoringConfig()
    start = window_start(as_of, lookback_days(config))
    snapshot_store = await store.load_snapshot(start, as_of)
    return MetricsEngine(snapshot_store, config=config, zones=zones, cache_enabled=cache_enabled)


async def compute_snapshot(
    store: SqlAlchemyMetricsStore,
    as_of: date,
    config: Optional[ScoringConfig] = None,
    zones: Optional[ZoneClassifier] = None,
) -> DashboardSnapshot:
    engine = await load_engine(store, as_of, config=config, zones=zones)
    return engine.snapshot(as_of)
