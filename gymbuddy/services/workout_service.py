"""
Workout log service.

Workouts are owned by a single user and stored as-is in the `workouts` table.
"""

import logging
from typing import Any, Dict, List, cast

from supabase import Client

logger = logging.getLogger(__name__)


async def create_workout(
    supabase_client: Client,
    user_id: str,
    name: str,
    date: str,
    exercises: List[Any],
) -> Dict[str, Any]:
    """
    Store a workout for the user.

    Returns:
        The created workout row (including its generated id)
    """
    workout_data = {
        "owner_id": user_id,
        "name": name,
        "date": date,
        "exercises": exercises,
    }

    logger.info(f"Creating workout for user {user_id}: {len(exercises)} exercises")

    result = supabase_client.table("workouts").insert(workout_data).execute()

    if not result.data or len(result.data) == 0:
        raise Exception("Failed to create workout: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def get_user_workouts(
    supabase_client: Client,
    user_id: str
) -> List[Dict[str, Any]]:
    """List the user's workouts."""
    result = (
        supabase_client.table("workouts")
        .select("*")
        .eq("owner_id", user_id)
        .execute()
    )

    workouts = cast(List[Dict[str, Any]], result.data or [])
    logger.debug(f"Found {len(workouts)} workouts for user {user_id}")

    return workouts
