from datetime import date
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from metrics_engine.config import Settings, get_settings
from metrics_engine.database import get_db
from metrics_engine.services.engine import MetricsEngine, load_engine, local_today
from metrics_engine.services.scoring_config import ScoringConfig, build_scoring_config
from metrics_engine.services.store import SqlAlchemyMetricsStore

DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


@lru_cache
def get_scoring_config() -> ScoringConfig:
    """Built once per process and shared by every request."""
    settings = get_settings()
    return build_scoring_config(settings.scoring_config_path, settings.activity_weight_preset)


ScoringConfigDep = Annotated[ScoringConfig, Depends(get_scoring_config)]


def get_metrics_store(db: DbSession) -> SqlAlchemyMetricsStore:
    return SqlAlchemyMetricsStore(db)


MetricsStore = Annotated[SqlAlchemyMetricsStore, Depends(get_metrics_store)]


def resolve_as_of(
    settings: AppSettings,
    as_of: Optional[date] = Query(None, description="Day to compute for; defaults to today"),
) -> date:
    return as_of or local_today(settings.timezone)


AsOf = Annotated[date, Depends(resolve_as_of)]


async def get_engine(
    store: MetricsStore,
    as_of: AsOf,
    config: ScoringConfigDep,
    settings: AppSettings,
) -> MetricsEngine:
    return await load_engine(store, as_of, config=config, cache_enabled=settings.series_cache_enabled)


Engine = Annotated[MetricsEngine, Depends(get_engine)]
