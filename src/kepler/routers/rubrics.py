from fastapi import APIRouter, Depends, HTTPException, Query

from kepler.dependencies import get_llm_client, get_persistence, get_rubric_store
from kepler.exceptions import RubricSourceError
from kepler.schemas.rubric import Rubric
from kepler.schemas.scoring import HealthResponse, TranscriptRecord
from kepler.services.llm import LLMClient
from kepler.services.persistence import PersistenceService
from kepler.services.rubric_store import RubricStore

router = APIRouter(prefix="/api/v1", tags=["rubrics"])


@router.get("/rubrics", response_model=list[Rubric])
async def list_rubrics(
    store: RubricStore = Depends(get_rubric_store),
) -> list[Rubric]:
    """Active rubrics, ordered by criterion name."""
    try:
        return store.list_active()
    except RubricSourceError:
        raise HTTPException(status_code=500, detail="Failed to fetch rubrics")


@router.get("/transcripts", response_model=list[TranscriptRecord])
async def list_transcripts(
    limit: int = Query(default=20, ge=1, le=200),
    persistence: PersistenceService | None = Depends(get_persistence),
) -> list[TranscriptRecord]:
    """Most recently scored transcripts."""
    if persistence is None:
        return []
    return persistence.list_results(limit)


@router.get("/transcripts/{transcript_id}", response_model=TranscriptRecord)
async def get_transcript(
    transcript_id: str,
    persistence: PersistenceService | None = Depends(get_persistence),
) -> TranscriptRecord:
    record = persistence.load_result(transcript_id) if persistence else None
    if record is None:
        raise HTTPException(status_code=404, detail="Transcript not found")
    return record


@router.get("/health", response_model=HealthResponse)
async def health(
    store: RubricStore = Depends(get_rubric_store),
    client: LLMClient = Depends(get_llm_client),
) -> HealthResponse:
    """Check service health: rubrics loadable and LLM reachable."""
    try:
        rubric_count = len(store.list_active())
    except RubricSourceError:
        rubric_count = 0
    llm_reachable = await client.is_reachable()
    return HealthResponse(rubric_count=rubric_count, llm_reachable=llm_reachable)
