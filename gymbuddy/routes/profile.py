"""
Profile API endpoints.

Provides endpoints for saving and reading the caller's fitness profile.
Each profile is 1:1 with an auth user; saves merge into the stored profile.
"""

import logging
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status

from gymbuddy.auth.dependencies import get_authenticated_user, AuthenticatedUser
from gymbuddy.config import Settings, get_settings
from gymbuddy.db.client import get_supabase_client
from gymbuddy.services import get_user_profile, save_user_profile
from gymbuddy.schemas.profile import (
    ProfileSaveRequest,
    ProfileSaveResponse,
    UserProfile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.post(
    "",
    response_model=ProfileSaveResponse,
    status_code=status.HTTP_200_OK,
    summary="Save user profile",
    description="""
    Create or update the authenticated user's profile.

    Merge semantics:
    - The first save creates the profile
    - Later saves overwrite only the fields present in the request
    - Fields absent from the request keep their stored values

    The email is always taken from the auth token, never from the body.
    """
)
async def save_profile(
    request: ProfileSaveRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProfileSaveResponse:
    """
    Save the authenticated user's profile.

    Auth
    - Handled by get_authenticated_user dependency

    Parse/Validate Request
    - FastAPI validates ProfileSaveRequest automatically

    Call Service
    - save_user_profile() upserts only the provided fields

    Map Output -> ResponseModel
    - Return the merged profile
    """
    logger.info(f"Saving profile for user {auth_user.user_id}")

    updates = request.model_dump(exclude_unset=True)

    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        saved = await save_user_profile(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            email=auth_user.email,
            **updates
        )

        return ProfileSaveResponse(
            message="Profile saved successfully!",
            profile=UserProfile.model_validate(saved),
        )

    except Exception as e:
        logger.error(f"Failed to save profile for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "save_error",
                "details": "Error saving profile"
            }
        )


@router.get(
    "",
    response_model=UserProfile,
    status_code=status.HTTP_200_OK,
    summary="Get user profile",
    description="Retrieve the authenticated user's profile."
)
async def get_profile(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserProfile:
    """
    Get the authenticated user's profile.
    """
    logger.info(f"Fetching profile for user {auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        profile = await get_user_profile(
            supabase_client=supabase_client,
            user_id=auth_user.user_id
        )

        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={
                    "error": "not_found",
                    "details": "Profile not found"
                }
            )

        return UserProfile.model_validate(profile)

    except HTTPException:
        # Re-raise HTTP exceptions (like 404)
        raise
    except Exception as e:
        logger.error(f"Failed to fetch profile for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Error fetching profile"
            }
        )
