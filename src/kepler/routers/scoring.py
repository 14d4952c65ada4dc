import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from kepler.dependencies import get_persistence, get_rubric_store, get_scorer
from kepler.exceptions import (
    KeplerError,
    NoActiveRubricsError,
    RubricSourceError,
    TranscriptValidationError,
)
from kepler.schemas.scoring import ScoreRequest, ScoreResponse
from kepler.services.persistence import PersistenceService
from kepler.services.rubric_store import RubricStore
from kepler.services.scoring import ScoringService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["scoring"])


@router.post("/score", response_model=ScoreResponse)
async def score_transcript(
    body: ScoreRequest,
    scorer: ScoringService = Depends(get_scorer),
    store: RubricStore = Depends(get_rubric_store),
    persistence: PersistenceService | None = Depends(get_persistence),
) -> ScoreResponse:
    """Score a transcript against all active rubrics."""
    start = time.perf_counter()

    try:
        transcript = scorer.validate_transcript(body.transcript)
    except TranscriptValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        rubrics = store.list_active()
    except RubricSourceError as e:
        logger.error("Error fetching rubrics: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch rubrics")
    if not rubrics:
        raise HTTPException(status_code=404, detail="No active rubrics found")

    try:
        result = await scorer.score(transcript, rubrics)
    except TranscriptValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoActiveRubricsError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except KeplerError as e:
        raise HTTPException(status_code=500, detail=str(e))

    transcript_id: str | None = None
    if persistence is not None:
        try:
            transcript_id = persistence.save_result(transcript, result).id
        except OSError as e:
            logger.warning("Failed to persist scoring result: %s", e)

    return ScoreResponse(
        **result.model_dump(),
        transcript_id=transcript_id,
        processing_time_ms=(time.perf_counter() - start) * 1000,
    )
