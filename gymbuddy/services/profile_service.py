"""
User profile service.

Handles reading and saving user profiles in the Supabase `users` table.
Profiles are 1:1 with auth users and are never deleted by this service.
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

logger = logging.getLogger(__name__)


async def get_user_profile(
    supabase_client: Client,
    user_id: str
) -> Optional[Dict[str, Any]]:
    """
    Fetch a user's profile by id.

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The user's ID

    Returns:
        The profile row, or None if not found
    """
    logger.debug(f"Fetching profile for user {user_id}")

    result = (
        supabase_client.table("users")
        .select("*")
        .eq("user_id", user_id)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        logger.warning(f"Profile not found for user {user_id}")
        return None

    return cast(Dict[str, Any], result.data[0])


async def get_user_by_email(
    supabase_client: Client,
    email: str
) -> Optional[Dict[str, Any]]:
    """
    Find a profile by email. The first match wins if several rows share it.
    """
    result = (
        supabase_client.table("users")
        .select("*")
        .eq("email", email)
        .limit(1)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        logger.info("No profile found for the requested email")
        return None

    return cast(Dict[str, Any], result.data[0])


async def list_all_profiles(supabase_client: Client) -> List[Dict[str, Any]]:
    """
    List every stored profile, in store order.
    """
    result = supabase_client.table("users").select("*").execute()

    profiles = cast(List[Dict[str, Any]], result.data or [])
    logger.debug(f"Listed {len(profiles)} profiles")

    return profiles


async def save_user_profile(
    supabase_client: Client,
    user_id: str,
    email: Optional[str] = None,
    **fields: Any
) -> Dict[str, Any]:
    """
    Create or merge-update the user's profile.

    Only the given fields are written: an upsert on user_id inserts the row on
    first save and afterwards updates just the supplied columns, so absent
    fields keep their stored values.

    Args:
        supabase_client: Authenticated Supabase client
        user_id: The authenticated user's ID
        email: Email from the auth token, refreshed on every save when present
        **fields: Profile columns to write (username, age, gym_name, ...)

    Returns:
        The stored profile row

    Security:
        - RLS enforces user_id = auth.uid() for writes
    """
    row: Dict[str, Any] = {"user_id": user_id, **fields}
    if email:
        row["email"] = email

    logger.info(f"Saving profile for user {user_id}: {sorted(fields.keys())}")

    result = (
        supabase_client.table("users")
        .upsert(row, on_conflict="user_id")
        .execute()
    )

    if not result.data or len(result.data) == 0:
        raise Exception("Failed to save profile: no data returned")

    saved: Dict[str, Any] = cast(Dict[str, Any], result.data[0])
    logger.info(f"Profile saved successfully for user {user_id}")

    return saved
