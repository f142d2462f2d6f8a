from fastapi import APIRouter

from metrics_engine.api.deps import AsOf, Engine
from metrics_engine.schemas.context import ScoresResponse
from metrics_engine.services.zones import score_labels, stress_label

router = APIRouter()


@router.get("", response_model=ScoresResponse)
async def get_scores(engine: Engine, as_of: AsOf) -> ScoresResponse:
    """All composite scores for one day, with their labels."""
    scores = engine.scores(as_of)
    return ScoresResponse(
        as_of=as_of,
        scores=scores,
        labels=score_labels(scores),
        stress_label=stress_label(scores.stress),
    )
