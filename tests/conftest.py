from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from kepler.config import Settings
from kepler.schemas.rubric import Rubric
from kepler.services.llm import LLMClient
from kepler.services.persistence import PersistenceService
from kepler.services.rubric_store import RubricStore
from kepler.services.scoring import ScoringService


class StubOracle:
    """Deterministic similarity oracle recording its calls."""

    def __init__(self, score: float = 0.8) -> None:
        self.score = score
        self.calls: list[tuple[str, str]] = []

    async def similarity(self, transcript: str, description: str) -> float:
        self.calls.append((transcript, description))
        return self.score


@pytest.fixture
def mock_settings() -> Settings:
    return Settings(
        llm_api_key="test-key",
        llm_base_url="http://llm.test/v1",
        llm_model_name="test-model",
        llm_temperature=0.3,
    )


@pytest.fixture
def stub_oracle() -> StubOracle:
    return StubOracle(0.8)


@pytest.fixture
def scorer(stub_oracle: StubOracle, mock_settings: Settings) -> ScoringService:
    return ScoringService(stub_oracle, mock_settings)


@pytest.fixture
def intro_rubric() -> Rubric:
    return Rubric(
        id="intro",
        criterion_name="Introduction",
        criterion_description="Greet and introduce yourself.",
        keywords="hello,name",
        weight=1,
        min_words=5,
        max_words=50,
    )


@pytest.fixture
def mock_rubric_store(intro_rubric: Rubric) -> MagicMock:
    store = MagicMock(spec=RubricStore)
    store.list_active.return_value = [intro_rubric]
    return store


@pytest.fixture
def persistence(tmp_path: Path) -> PersistenceService:
    return PersistenceService(tmp_path / "results")


@pytest.fixture
def mock_llm_client() -> MagicMock:
    client = MagicMock(spec=LLMClient)
    client.is_reachable = AsyncMock(return_value=True)
    return client


@pytest.fixture
def test_app(
    scorer: ScoringService,
    mock_rubric_store: MagicMock,
    persistence: PersistenceService,
    mock_llm_client: MagicMock,
):
    """Create a test FastAPI app with stubbed dependencies."""
    from fastapi import FastAPI
    from kepler.routers.rubrics import router as rubrics_router
    from kepler.routers.scoring import router as scoring_router

    app = FastAPI()
    app.state.scorer = scorer
    app.state.rubric_store = mock_rubric_store
    app.state.persistence = persistence
    app.state.llm_client = mock_llm_client
    app.include_router(scoring_router)
    app.include_router(rubrics_router)
    return app


@pytest.fixture
def client(test_app) -> TestClient:
    return TestClient(test_app)
