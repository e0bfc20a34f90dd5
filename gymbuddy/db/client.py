"""
Supabase client factory with RLS enforcement.

Clients are created per request with the caller's JWT so that Row Level
Security applies to every query.

Assumed policies on the GymBuddy tables:
- users: readable by any authenticated user (profiles are social), writable
  only by their owner
- friends / workouts / notifications: rows visible only to owner_id = auth.uid()
- friends: unique (owner_id, friend_id)
- add_friend_pair / remove_friend_pair: SECURITY DEFINER functions that write
  both friend edges in one transaction
"""

import logging

from gymbuddy.config import Settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: str, settings: Settings) -> Client:
    """
    Create an authenticated Supabase client for a specific user.

    Args:
        access_token: The user's JWT access token, already verified by
                      gymbuddy.auth.dependencies.get_authenticated_user.
        settings: Application settings holding the project URL and publishable key.

    Returns:
        An authenticated Supabase client that enforces RLS.
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    # The token's 'sub' claim is what RLS policies see as auth.uid()
    client.postgrest.auth(access_token)

    logger.debug("Created authenticated Supabase client with user token (RLS enforced)")

    return client
