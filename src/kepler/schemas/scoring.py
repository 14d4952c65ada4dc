from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ScoreRequest(BaseModel):
    # Any JSON value; ScoringService.validate_transcript owns rejection
    transcript: Any = None


class CriterionScore(BaseModel):
    """Per-rubric breakdown of a scoring run."""

    name: str
    description: str
    weight: float
    keyword_score: float
    keywords_found: list[str] = Field(default_factory=list)
    similarity_score: float
    length_score: float
    combined_score: float
    weighted_score: float
    feedback: str = ""


class ScoreResult(BaseModel):
    overall_score: float
    word_count: int
    criteria: list[CriterionScore] = Field(default_factory=list)


class ScoreResponse(ScoreResult):
    transcript_id: str | None = None
    processing_time_ms: float


class TranscriptRecord(BaseModel):
    """Persisted scoring history entry."""

    id: str
    transcript_text: str
    overall_score: float
    word_count: int
    scoring_data: list[CriterionScore] = Field(default_factory=list)
    created_at: datetime


class HealthResponse(BaseModel):
    rubric_count: int
    llm_reachable: bool
