"""
Health check endpoint schemas.

The health endpoint is PUBLIC (no authentication required).
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Response model for GET /health.

    Used by load balancers and deployment checks.
    """

    status: str = Field(
        default="ok",
        description="Always 'ok' if the API is responding",
        examples=["ok"]
    )
    service: str = Field(
        default="gymbuddy-backend",
        description="Name of the responding service"
    )
