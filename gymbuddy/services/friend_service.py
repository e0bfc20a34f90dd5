"""
Service layer for friend relations.

A friendship is two symmetric rows in the `friends` table, one owned by each
user. Both rows are created (and removed) by a single RPC call so a
half-written friendship can never be observed.
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from gymbuddy.services.profile_service import get_user_by_email, get_user_profile

logger = logging.getLogger(__name__)

UNKNOWN_USER_NAME = "Unknown User"


class FriendNotFoundError(LookupError):
    """The requested friend (or the caller's own profile) does not exist."""


class InvalidFriendRequestError(ValueError):
    """The friend request is not acceptable (self-add, duplicate, no identifier)."""


async def get_friends(
    supabase_client: Client,
    user_id: str
) -> List[Dict[str, Any]]:
    """
    List the friend edges owned by the user.

    Returns:
        Rows with friend_id, name and added_at
    """
    result = (
        supabase_client.table("friends")
        .select("friend_id, name, added_at")
        .eq("owner_id", user_id)
        .execute()
    )

    return cast(List[Dict[str, Any]], result.data or [])


async def get_friend_ids(supabase_client: Client, user_id: str) -> List[str]:
    """Return the ids of the user's current friends."""
    friends = await get_friends(supabase_client, user_id)
    return [str(row["friend_id"]) for row in friends if row.get("friend_id")]


async def is_friend(supabase_client: Client, user_id: str, friend_id: str) -> bool:
    result = (
        supabase_client.table("friends")
        .select("friend_id")
        .eq("owner_id", user_id)
        .eq("friend_id", friend_id)
        .execute()
    )
    return bool(result.data)


async def add_friend(
    supabase_client: Client,
    user_id: str,
    friend_id: Optional[str] = None,
    friend_email: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a symmetric friendship between the caller and another user.

    The friend is looked up by id, or by email when no id is given. Each edge
    stores a snapshot of the other user's username.

    Uses RPC function `add_friend_pair` so both edges are written in one
    transaction.

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The caller's user ID (from auth token)
        friend_id: The friend's user ID (optional)
        friend_email: The friend's email (optional, used if friend_id is missing)

    Returns:
        The caller's new edge (friend_id, name, added_at)

    Raises:
        InvalidFriendRequestError: No identifier, self-add, or already friends
        FriendNotFoundError: Caller or friend profile does not exist
        Exception: If the RPC call fails
    """
    if not friend_id and not friend_email:
        raise InvalidFriendRequestError("Either friendId or friendEmail is required")

    user_profile = await get_user_profile(supabase_client, user_id)
    if not user_profile:
        raise FriendNotFoundError("User not found")

    if friend_id:
        friend_profile = await get_user_profile(supabase_client, friend_id)
        if not friend_profile:
            raise FriendNotFoundError("Friend not found")
    else:
        friend_profile = await get_user_by_email(supabase_client, cast(str, friend_email))
        if not friend_profile:
            raise FriendNotFoundError("No user found with that email")

    friend_user_id = str(friend_profile["user_id"])

    if friend_user_id == user_id:
        raise InvalidFriendRequestError("You cannot add yourself as a friend")

    if await is_friend(supabase_client, user_id, friend_user_id):
        raise InvalidFriendRequestError("Already friends with this user")

    friend_name = friend_profile.get("username") or UNKNOWN_USER_NAME
    user_name = user_profile.get("username") or UNKNOWN_USER_NAME

    logger.info(f"Adding friend pair {user_id} <-> {friend_user_id}")

    result = supabase_client.rpc(
        "add_friend_pair",
        {
            "p_user_id": user_id,
            "p_friend_id": friend_user_id,
            "p_user_name": user_name,
            "p_friend_name": friend_name,
        }
    ).execute()

    if not result.data:
        raise Exception("RPC add_friend_pair failed: no data returned")

    rpc_row = result.data[0] if isinstance(result.data, list) else result.data

    return {
        "friend_id": friend_user_id,
        "name": friend_name,
        "added_at": rpc_row.get("added_at") if isinstance(rpc_row, dict) else None,
    }


async def remove_friend(
    supabase_client: Client,
    user_id: str,
    friend_id: str
) -> None:
    """
    Remove both edges of a friendship.

    Raises:
        FriendNotFoundError: If the users are not friends
        Exception: If the RPC call fails
    """
    if not await is_friend(supabase_client, user_id, friend_id):
        raise FriendNotFoundError("Not friends with this user")

    logger.info(f"Removing friend pair {user_id} <-> {friend_id}")

    result = supabase_client.rpc(
        "remove_friend_pair",
        {"p_user_id": user_id, "p_friend_id": friend_id}
    ).execute()

    if result.data is False:
        raise Exception("RPC remove_friend_pair reported no rows removed")
