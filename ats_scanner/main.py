from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ats_scanner.middleware.error_handlers import ExceptionHandlerMiddleware, PerformanceMiddleware
from ats_scanner.routers import analysis, prompts, reference
from ats_scanner.services.db import init_indexes, load_reference_overrides
from ats_scanner.services.prompt_composer import PromptComposer
from ats_scanner.services.reference_data import default_reference_data
from ats_scanner.services.scoring import CompositeScoringEngine
from ats_scanner.utils.config import load_settings
from ats_scanner.utils.logging_config import configure_for_environment, get_logger

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build settings, reference data and the engine once per process"""
    logger.info("ATS Scanner API starting up...")

    settings = load_settings()
    reference_data = default_reference_data(settings)

    if settings.features.persist_results or settings.features.load_reference_overrides:
        await init_indexes()
        if settings.features.load_reference_overrides:
            industries, ats_profiles = await load_reference_overrides()
            reference_data = reference_data.with_overrides(industries, ats_profiles)

    app.state.settings = settings
    app.state.reference = reference_data
    app.state.engine = CompositeScoringEngine(reference_data, settings)
    app.state.composer = PromptComposer()
    logger.info("ATS Scanner API startup completed")

    yield

    logger.info("ATS Scanner API shutting down...")


app = FastAPI(title="ATS Scanner API", version="1.0.0", lifespan=lifespan)

# Later middleware wraps earlier middleware
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the ATS Scanner API", "version": "1.0.0", "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    return {"status": "healthy"}


app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])
app.include_router(reference.router, prefix="/api/reference", tags=["reference"])
app.include_router(prompts.router, prefix="/api/prompts", tags=["prompts"])

logger.info("ATS Scanner API initialized successfully")
