"""
Pytest configuration for GymBuddy backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")

from gymbuddy.auth.dependencies import AuthenticatedUser  # noqa: E402
from gymbuddy.config import Settings  # noqa: E402
from gymbuddy.schemas.profile import UserProfile  # noqa: E402


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def test_settings():
    """Settings with fast AI bounds (no real backoff sleeps)."""
    return Settings(
        SUPABASE_URL="http://localhost:54321",
        SUPABASE_PUBLISHABLE_KEY="test-publishable-key",
        GOOGLE_API_KEY="test-google-api-key",
        GEMINI_MODEL="gemini-2.0-flash",
        AI_TIMEOUT_SECONDS=2.0,
        AI_MAX_RETRIES=1,
        AI_RETRY_BACKOFF_SECONDS=0.0,
        AI_RETRY_BACKOFF_MAX_SECONDS=0.0,
        AI_CIRCUIT_FAILURE_THRESHOLD=3,
        AI_CIRCUIT_RESET_SECONDS=60.0,
        GYM_MATCH_POLICY="prefer_match",
        ENVIRONMENT="testing",
    )


@pytest.fixture
def test_user():
    return AuthenticatedUser(
        user_id="test-user-id",
        access_token="test-access-token",
        email="test@example.com",
    )


@pytest.fixture
def requester_profile():
    """Profile of the requesting user (trains at Gold's Gym)."""
    return UserProfile(
        user_id="test-user-id",
        email="test@example.com",
        username="tester",
        age=28,
        gym_name="Gold's Gym",
        bio="Powerlifting and morning runs",
    )
