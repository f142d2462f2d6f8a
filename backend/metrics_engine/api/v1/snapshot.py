from fastapi import APIRouter

from metrics_engine.api.deps import AsOf, Engine
from metrics_engine.schemas.context import DashboardSnapshot

router = APIRouter()


@router.get("", response_model=DashboardSnapshot)
async def get_snapshot(engine: Engine, as_of: AsOf) -> DashboardSnapshot:
    """Everything the dashboard shows for one day."""
    return engine.snapshot(as_of)
