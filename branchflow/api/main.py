"""FastAPI application entry point for Branchflow.

Run with:
    uvicorn branchflow.api.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from structlog import get_logger

from branchflow import __version__
from branchflow.api.middleware.logging_middleware import LoggingMiddleware
from branchflow.api.routes.approvals import router as approvals_router
from branchflow.api.routes.calendar import router as calendar_router
from branchflow.api.routes.events import router as events_router
from branchflow.api.routes.health import router as health_router
from branchflow.api.routes.proctor import router as proctor_router
from branchflow.bootstrap.database import apply_schema, dispose_engine, get_session_factory
from branchflow.bootstrap.logging import configure_logging
from branchflow.config.workflow_config import AppConfig

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and, for postgres storage, create the schema."""
    app_config = AppConfig.from_environment()
    configure_logging(app_config)
    logger.info(
        "application_starting",
        environment=app_config.environment,
        storage=app_config.storage,
        version=__version__,
    )

    if app_config.storage == "postgres":
        await apply_schema(get_session_factory(app_config.database_url))

    yield

    if app_config.storage == "postgres":
        await dispose_engine()
    logger.info("application_stopped")


app = FastAPI(
    title="Branchflow API",
    description="Event approval, calendar admission and proctor assignment for a student branch",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(events_router)
app.include_router(approvals_router)
app.include_router(calendar_router)
app.include_router(proctor_router)
