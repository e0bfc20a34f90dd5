"""
Friend API endpoints.

- POST /friends: add a friend by id or email (both edges written atomically)
- GET /friends: list the caller's friends
- DELETE /friends/{friend_id}: remove a friend (both edges)
"""

import logging
from typing import Annotated, Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException, status
from postgrest.exceptions import APIError

from gymbuddy.auth.dependencies import get_authenticated_user, AuthenticatedUser
from gymbuddy.config import Settings, get_settings
from gymbuddy.db.client import get_supabase_client
from gymbuddy.services import (
    FriendNotFoundError,
    InvalidFriendRequestError,
    add_friend,
    get_friends,
    remove_friend,
)
from gymbuddy.schemas.friends import (
    FriendAddRequest,
    FriendAddResponse,
    FriendDeleteResponse,
    FriendResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/friends", tags=["friends"])


def _to_friend_response(row: Dict[str, Any]) -> FriendResponse:
    added_at = row.get("added_at")
    return FriendResponse(
        friend_id=str(row["friend_id"]),
        name=row.get("name") or "Unknown User",
        added_at=str(added_at) if added_at is not None else None,
    )


@router.post(
    "",
    response_model=FriendAddResponse,
    status_code=status.HTTP_200_OK,
    summary="Add a friend",
    description="""
    Add a friend by user id or by email.

    Validation:
    - Either friendId or friendEmail is required (400)
    - The friend must exist (404)
    - You cannot add yourself (400)
    - You cannot add an existing friend again (400)

    Both friend edges are created in a single transaction.
    """
)
async def add_friend_endpoint(
    request: FriendAddRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FriendAddResponse:
    logger.info(f"POST /friends called by user_id={auth_user.user_id}")

    if not request.friend_id and not request.friend_email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "invalid_request",
                "details": "Either friendId or friendEmail is required"
            }
        )

    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        edge = await add_friend(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            friend_id=request.friend_id,
            friend_email=request.friend_email,
        )

        return FriendAddResponse(
            message="Friend added successfully!",
            friend=_to_friend_response(edge),
        )

    except FriendNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": str(e)}
        )
    except InvalidFriendRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": str(e)}
        )
    except APIError as e:
        # A concurrent add can still hit the (owner_id, friend_id) unique key
        if e.code == "23505":  # unique_violation
            logger.warning(f"Duplicate friend edge for user {auth_user.user_id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "invalid_request", "details": "Already friends with this user"}
            )
        logger.error(f"Database error adding friend for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "add_friend_error", "details": "Error adding friend"}
        )
    except Exception as e:
        logger.error(f"Error adding friend for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "add_friend_error", "details": "Error adding friend"}
        )


@router.get(
    "",
    response_model=List[FriendResponse],
    status_code=status.HTTP_200_OK,
    summary="List friends",
    description="List the authenticated user's friends."
)
async def list_friends_endpoint(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> List[FriendResponse]:
    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        rows = await get_friends(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Error fetching friends for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Error fetching friends"}
        )

    return [_to_friend_response(row) for row in rows]


@router.delete(
    "/{friend_id}",
    response_model=FriendDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Remove a friend",
    description="Remove a friend. Both friend edges are deleted in a single transaction."
)
async def remove_friend_endpoint(
    friend_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FriendDeleteResponse:
    logger.info(f"DELETE /friends/{friend_id} called by user_id={auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        await remove_friend(supabase_client, auth_user.user_id, friend_id)
    except FriendNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Error removing friend for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "remove_friend_error", "details": "Error removing friend"}
        )

    return FriendDeleteResponse(message="Friend removed successfully!")
