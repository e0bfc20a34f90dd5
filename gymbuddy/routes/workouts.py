"""
Workout log API endpoints.

- POST /workouts: log a workout
- GET /workouts: list the caller's workouts
"""

import logging
from typing import Annotated, Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException, status

from gymbuddy.auth.dependencies import get_authenticated_user, AuthenticatedUser
from gymbuddy.config import Settings, get_settings
from gymbuddy.db.client import get_supabase_client
from gymbuddy.services import create_workout, get_user_workouts
from gymbuddy.schemas.workouts import (
    WorkoutCreateRequest,
    WorkoutCreateResponse,
    WorkoutResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workouts", tags=["workouts"])


def _to_workout_response(row: Dict[str, Any]) -> WorkoutResponse:
    return WorkoutResponse(
        id=str(row["id"]),
        name=row.get("name") or "",
        date=str(row.get("date") or ""),
        exercises=row.get("exercises") or [],
    )


@router.post(
    "",
    response_model=WorkoutCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a workout",
    description="Store a workout (name, date and exercises are required)."
)
async def create_workout_endpoint(
    request: WorkoutCreateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WorkoutCreateResponse:
    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        created = await create_workout(
            supabase_client=supabase_client,
            user_id=auth_user.user_id,
            name=request.name,
            date=request.date,
            exercises=request.exercises,
        )
    except Exception as e:
        logger.error(f"Error saving workout for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": "Error saving workout"}
        )

    return WorkoutCreateResponse(
        message="Workout saved successfully!",
        workout=_to_workout_response(created),
    )


@router.get(
    "",
    response_model=List[WorkoutResponse],
    status_code=status.HTTP_200_OK,
    summary="List workouts",
    description="List the authenticated user's workouts."
)
async def list_workouts_endpoint(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> List[WorkoutResponse]:
    supabase_client = get_supabase_client(auth_user.access_token, settings)

    try:
        rows = await get_user_workouts(supabase_client, auth_user.user_id)
    except Exception as e:
        logger.error(f"Error fetching workouts for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Error fetching workouts"}
        )

    return [_to_workout_response(row) for row in rows]
