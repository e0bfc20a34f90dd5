"""
Notification service.

Notifications are per-user messages; the timestamp is assigned by the
database on insert.
"""

import logging
from typing import Any, Dict, List, cast

from supabase import Client

logger = logging.getLogger(__name__)


async def create_notification(
    supabase_client: Client,
    user_id: str,
    message: str
) -> Dict[str, Any]:
    """
    Store a notification for the user.

    Returns:
        The created notification row
    """
    logger.info(f"Creating notification for user {user_id}")

    result = (
        supabase_client.table("notifications")
        .insert({"owner_id": user_id, "message": message})
        .execute()
    )

    if not result.data or len(result.data) == 0:
        raise Exception("Failed to create notification: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def get_user_notifications(
    supabase_client: Client,
    user_id: str
) -> List[Dict[str, Any]]:
    """List the user's notifications, newest first."""
    result = (
        supabase_client.table("notifications")
        .select("*")
        .eq("owner_id", user_id)
        .order("timestamp", desc=True)
        .execute()
    )

    return cast(List[Dict[str, Any]], result.data or [])
