"""Kepler schemas."""

from kepler.schemas.rubric import Rubric
from kepler.schemas.scoring import (
    CriterionScore,
    ScoreRequest,
    ScoreResponse,
    ScoreResult,
    TranscriptRecord,
)

__all__ = [
    "CriterionScore",
    "Rubric",
    "ScoreRequest",
    "ScoreResponse",
    "ScoreResult",
    "TranscriptRecord",
]
