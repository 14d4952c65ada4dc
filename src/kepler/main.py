import logging
from contextlib import asynccontextmanager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kepler.config import settings
from kepler.exceptions import KeplerError, NoActiveRubricsError, TranscriptValidationError
from kepler.routers import rubrics, scoring
from kepler.services.llm import LLMClient
from kepler.services.persistence import PersistenceService
from kepler.services.rubric_store import RubricStore
from kepler.services.scoring import ScoringService
from kepler.services.similarity import SimilarityService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire services on startup, close the LLM client on shutdown."""
    logger.info("Starting Kepler service ...")

    llm_client = LLMClient(settings)
    try:
        app.state.llm_client = llm_client
        app.state.rubric_store = RubricStore(settings.rubrics_file)
        app.state.scorer = ScoringService(SimilarityService(llm_client, settings), settings)
        app.state.persistence = (
            PersistenceService(settings.results_dir) if settings.persist_results else None
        )

        logger.info("Kepler service ready (rubrics: %s).", app.state.rubric_store.source)
        yield
    finally:
        logger.info("Shutting down Kepler service ...")
        await llm_client.close()


app = FastAPI(
    title="Kepler",
    description="Rubric-based transcript scoring service",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scoring.router)
app.include_router(rubrics.router)


_ERROR_STATUS: dict[type[KeplerError], int] = {
    TranscriptValidationError: 400,
    NoActiveRubricsError: 404,
}


@app.exception_handler(KeplerError)
async def kepler_error_handler(request: Request, exc: KeplerError):
    status_code = next(
        (code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls)), 500
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": str(exc) or "Unknown error"})
