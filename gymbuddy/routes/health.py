"""
Health check route for GymBuddy Backend.

This endpoint is PUBLIC (no authentication required) and provides a simple
status check for load balancers and deployment verification.
"""

from fastapi import APIRouter

from gymbuddy.schemas.health import HealthResponse
from gymbuddy.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Public health check endpoint (no authentication required).",
    status_code=200,
)
async def health_check() -> HealthResponse:
    """Return {"status": "ok"} while the API is up."""
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
