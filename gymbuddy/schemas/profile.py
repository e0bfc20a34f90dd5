"""
Pydantic schemas for profile endpoints.

A profile is 1:1 with an authenticated user and carries the fitness details
used for partner matching (gym, age, bio).
"""

from typing import Optional
from pydantic import Field

from gymbuddy.schemas.base import CamelModel


class UserProfile(CamelModel):
    """
    A stored user profile.

    Rows from the `users` table validate directly (snake_case columns);
    responses serialize as camelCase.
    """
    user_id: str = Field(..., description="User UUID (from the auth token 'sub' claim)")
    email: Optional[str] = Field(None, description="User's email (from the auth token)")
    username: Optional[str] = Field(None, description="Display name shown to other users")
    age: Optional[int] = Field(None, description="Age in years")
    school: Optional[str] = Field(None, description="School or university")
    go_to_gym: Optional[bool] = Field(None, description="Whether the user trains at a gym")
    gym_name: Optional[str] = Field(
        None,
        description="Name of the user's gym. Used for exact-match partner filtering.",
        examples=["Gold's Gym", "Planet Fitness"]
    )
    bio: Optional[str] = Field(None, description="Free-text bio / training interests")
    profile_picture: Optional[str] = Field(None, description="Public URL to the profile picture")


class ProfileSaveRequest(CamelModel):
    """
    Request to create or update the caller's profile.

    Merge semantics: only fields present in the request are written,
    absent fields keep their stored value.
    """
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=130)
    school: Optional[str] = Field(None, max_length=200)
    go_to_gym: Optional[bool] = Field(None)
    gym_name: Optional[str] = Field(None, max_length=200)
    bio: Optional[str] = Field(None, max_length=1000)
    profile_picture: Optional[str] = Field(None, description="Public URL to the profile picture")


class ProfileSaveResponse(CamelModel):
    """Response after saving the profile."""
    message: str = Field(..., examples=["Profile saved successfully!"])
    profile: UserProfile = Field(..., description="The profile as stored after the merge")
