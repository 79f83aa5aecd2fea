"""ExamPrep FastAPI Application Entry Point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from examprep import __version__
from examprep.config import settings
from examprep.db import init_db
from examprep.exception_handlers import register_exception_handlers
from examprep.middleware import configure_logging, register_middleware
from examprep.routers import (
    attempts_router,
    categories_router,
    files_router,
    questions_router,
    users_router,
)
from examprep.schemas import ErrorResponseWithDetails, HealthResponse


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager."""
    configure_logging()
    logger.info(
        "Application starting",
        environment=settings.environment,
        debug=settings.debug,
    )
    if settings.auto_create_tables:
        await init_db()
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="ExamPrep API",
    description="Multiple-choice certification exam practice",
    version=__version__,
    lifespan=lifespan,
    responses={422: {"model": ErrorResponseWithDetails}},
)

register_middleware(app)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(categories_router, prefix="/api")
app.include_router(questions_router, prefix="/api")
app.include_router(attempts_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(files_router, prefix="/api")


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint",
)
async def health_check() -> HealthResponse:
    """Health check endpoint for container orchestration."""
    return HealthResponse(
        status="healthy",
        service="examprep-api",
        version=__version__,
    )
