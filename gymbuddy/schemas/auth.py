"""
Pydantic schemas for authentication endpoints.
"""

from typing import Optional
from pydantic import Field

from gymbuddy.schemas.base import CamelModel


class ProfileSummary(CamelModel):
    """
    Condensed profile info for the auth/me response.
    """
    username: Optional[str] = Field(None, description="Display name")
    gym_name: Optional[str] = Field(None, description="User's gym")
    profile_picture: Optional[str] = Field(None, description="Public URL to the profile picture")


class AuthMeResponse(CamelModel):
    """
    Response for GET /auth/me - Authenticated user identity.

    Used on app boot to hydrate session state and confirm token validity.
    """
    user_id: str = Field(..., description="User UUID (from JWT 'sub' claim)")
    email: Optional[str] = Field(
        None,
        description="User's email (from JWT 'email' claim, if present)"
    )
    profile: Optional[ProfileSummary] = Field(
        None,
        description="Profile summary, or null if the profile hasn't been saved yet."
    )
