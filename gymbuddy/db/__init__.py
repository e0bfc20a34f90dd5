"""
Database access layer for GymBuddy Backend.

All queries go through a per-request Supabase client carrying the caller's
JWT, so Row Level Security applies. Schema and migrations live outside this
repository.
"""

from .client import get_supabase_client

__all__ = ["get_supabase_client"]
