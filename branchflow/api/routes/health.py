"""Health check endpoint for the Branchflow API."""

from fastapi import APIRouter

from branchflow.api.models.health import HealthResponse
from branchflow.config.workflow_config import AppConfig

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return health status."""
    return HealthResponse(status="healthy", storage=AppConfig.from_environment().storage)
