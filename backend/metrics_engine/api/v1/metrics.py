from fastapi import APIRouter, HTTPException, Query, status

from metrics_engine.api.deps import AsOf, Engine, MetricsStore, ScoringConfigDep
from metrics_engine.analytics.window import window_start
from metrics_engine.schemas.context import MetricContext, MetricSeries
from metrics_engine.schemas.enums import MetricKind
from metrics_engine.services.engine import MetricsEngine
from metrics_engine.services.metric_catalog import METRIC_CATALOG, MetricDefinition

router = APIRouter()

MAX_SERIES_DAYS = 3650


def _definition(kind: str) -> MetricDefinition:
    try:
        return METRIC_CATALOG[MetricKind(kind)]
    except (ValueError, KeyError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown metric '{kind}'",
        )


@router.get("")
async def list_metrics() -> list[dict]:
    """Available metric kinds."""
    return [
        {"kind": d.kind.value, "title": d.title, "unit": d.unit}
        for d in METRIC_CATALOG.values()
    ]


@router.get("/{kind}", response_model=MetricContext)
async def get_metric_context(kind: str, engine: Engine, as_of: AsOf) -> MetricContext:
    definition = _definition(kind)
    return engine.context(definition.kind, as_of)


@router.get("/{kind}/series", response_model=MetricSeries)
async def get_metric_series(
    kind: str,
    store: MetricsStore,
    config: ScoringConfigDep,
    as_of: AsOf,
    days: int = Query(14, le=MAX_SERIES_DAYS, description="Window length in calendar days"),
) -> MetricSeries:
    """Raw gap-skipping series, for windows other than the context's own."""
    definition = _definition(kind)
    window = await store.load_snapshot(window_start(as_of, days), as_of)
    return MetricsEngine(window, config=config).series(definition.field, days, as_of)
