"""
Auth API endpoints.

- GET /auth/me - Get authenticated user identity

Token issuance and sign-in are handled by Supabase Auth on the client.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status

from gymbuddy.auth.dependencies import AuthenticatedUser, get_authenticated_user
from gymbuddy.config import Settings, get_settings
from gymbuddy.db.client import get_supabase_client
from gymbuddy.schemas.auth import AuthMeResponse, ProfileSummary
from gymbuddy.services import get_user_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _get_profile_summary(
    supabase_client: Any,
    user_id: str
) -> ProfileSummary | None:
    """
    Fetch condensed profile for auth/me response.

    Returns None if the user hasn't saved a profile yet.
    """
    profile = await get_user_profile(supabase_client, user_id)
    if not profile:
        logger.debug(f"No profile found for user_id={user_id}")
        return None

    return ProfileSummary.model_validate(profile)


@router.get(
    "/me",
    response_model=AuthMeResponse,
    status_code=status.HTTP_200_OK,
    summary="Get authenticated user identity",
    description="""
    Get the authenticated user's identity for session hydration.

    - Validates the bearer token
    - Returns userId and email from JWT claims
    - Includes a profile summary if the profile exists (null for new users)
    """
)
async def get_auth_me(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthMeResponse:
    try:
        supabase_client = get_supabase_client(auth_user.access_token, settings)
        profile = await _get_profile_summary(supabase_client, auth_user.user_id)

        return AuthMeResponse(
            user_id=auth_user.user_id,
            email=auth_user.email,
            profile=profile,
        )

    except Exception as e:
        logger.error(f"Error in get_auth_me for user_id={auth_user.user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "auth_me_failed", "details": "Failed to load user identity"}
        )
