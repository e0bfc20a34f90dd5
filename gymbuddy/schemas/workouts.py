"""
Pydantic schemas for workout log endpoints.
"""

from typing import Any, List
from pydantic import Field

from gymbuddy.schemas.base import CamelModel


class WorkoutCreateRequest(CamelModel):
    """Request to log a workout. All fields are required."""
    name: str = Field(..., min_length=1, max_length=200, examples=["Leg day"])
    date: str = Field(..., min_length=1, description="Workout date (ISO-8601)", examples=["2025-03-14"])
    exercises: List[Any] = Field(
        ...,
        description="Exercises performed, as sent by the client",
        examples=[[{"name": "Squat", "sets": 5, "reps": 5}]]
    )


class WorkoutResponse(CamelModel):
    """A stored workout."""
    id: str
    name: str
    date: str
    exercises: List[Any]


class WorkoutCreateResponse(CamelModel):
    message: str = Field(..., examples=["Workout saved successfully!"])
    workout: WorkoutResponse
