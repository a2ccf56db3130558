"""Health check endpoint for Tech Radar API."""

from fastapi import APIRouter

from tech_radar.api.models.health import HealthResponse
from tech_radar.bootstrap.radar import get_radar_config

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return health status.

    Returns:
        Health status with 200 OK.
    """
    return HealthResponse(
        status="healthy", store_backend=get_radar_config().store_backend
    )
