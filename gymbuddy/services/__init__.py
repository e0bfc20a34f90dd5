"""
Service layer for GymBuddy Backend.

Contains business logic that:
- Reads and writes user data through the RLS-scoped Supabase client
- Orchestrates the Gemini partner-matching pipeline
- Raises domain errors that the routes map to HTTP responses

Services act as the glue between routes (HTTP layer) and agents/database.
"""

from .friend_service import (
    FriendNotFoundError,
    InvalidFriendRequestError,
    add_friend,
    get_friend_ids,
    get_friends,
    remove_friend,
)
from .notification_service import create_notification, get_user_notifications
from .profile_service import (
    get_user_by_email,
    get_user_profile,
    list_all_profiles,
    save_user_profile,
)
from .workout_service import create_workout, get_user_workouts

__all__ = [
    "FriendNotFoundError",
    "InvalidFriendRequestError",
    "add_friend",
    "get_friend_ids",
    "get_friends",
    "remove_friend",
    "create_notification",
    "get_user_notifications",
    "get_user_by_email",
    "get_user_profile",
    "list_all_profiles",
    "save_user_profile",
    "create_workout",
    "get_user_workouts",
]
