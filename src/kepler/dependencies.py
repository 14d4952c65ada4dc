from fastapi import Request

from kepler.services.llm import LLMClient
from kepler.services.persistence import PersistenceService
from kepler.services.rubric_store import RubricStore
from kepler.services.scoring import ScoringService


def get_scorer(request: Request) -> ScoringService:
    """Retrieve the ScoringService singleton from app state."""
    return request.app.state.scorer


def get_rubric_store(request: Request) -> RubricStore:
    """Retrieve the RubricStore singleton from app state."""
    return request.app.state.rubric_store


def get_persistence(request: Request) -> PersistenceService | None:
    """Retrieve the PersistenceService from app state (None when disabled)."""
    return request.app.state.persistence


def get_llm_client(request: Request) -> LLMClient:
    """Retrieve the LLMClient singleton from app state."""
    return request.app.state.llm_client
