"""
Notification API endpoints.

- POST /notifications: store a notification for the caller
- GET /notifications: list the caller's notifications, newest first
"""

import logging
from typing import Annotated, Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException, status

from gymbuddy.auth.dependencies import get_authenticated_user, AuthenticatedUser
from gymbuddy.config import Settings, get_settings
from gymbuddy.db.client import get_supabase_client
from gymbuddy.services import create_notification, get_user_notifications
from gymbuddy.schemas.notifications import (
    NotificationCreateRequest,
    NotificationCreateResponse,
    NotificationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_notification_response(row: Dict[str, Any]) -> NotificationResponse:
    timestamp = row.get("timestamp")
    return NotificationResponse(
        id=str(row["id"]),
        message=row.get("message") or "",
        timestamp=str(timestamp) if timestamp is not None else None,
    )


@router.post(
    "",
    response_model=NotificationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Store a notification",
)
async def create_notification_endpoint(
    request: NotificationCreateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> NotificationCreateResponse:
    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        created = await create_notification(supabase_client, auth_user.user_id, request.message)
    except Exception as e:
        logger.error(f"Error saving notification for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": "Error saving notification"}
        )

    return NotificationCreateResponse(
        message="Notification saved successfully!",
        notification=_to_notification_response(created),
    )


@router.get(
    "",
    response_model=List[NotificationResponse],
    status_code=status.HTTP_200_OK,
    summary="List notifications",
    description="List the authenticated user's notifications, newest first."
)
async def list_notifications_endpoint(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> List[NotificationResponse]:
    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        rows = await get_user_notifications(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Error fetching notifications for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Error fetching notifications"}
        )

    return [_to_notification_response(row) for row in rows]
