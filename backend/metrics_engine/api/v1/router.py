from fastapi import APIRouter

from metrics_engine.api.v1 import (
    metrics,
    scores,
    snapshot,
)

api_router = APIRouter()

api_router.include_router(scores.router, prefix="/scores", tags=["scores"])
api_router.include_router(metrics.router, prefix="/metrics", tags=["metrics"])
api_router.include_router(snapshot.router, prefix="/snapshot", tags=["snapshot"])
