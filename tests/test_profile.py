"""
Tests for profile endpoints.

Tests cover:
- Profile retrieval (camelCase response)
- Profile save with merge semantics (only sent fields reach the service)
- Authentication and authorization
- Error cases
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch
from gymbuddy.main import app
from gymbuddy.auth.dependencies import get_authenticated_user, AuthenticatedUser

client = TestClient(app)


async def mock_get_authenticated_user_dependency():
    """Mock dependency that returns test AuthenticatedUser."""
    return AuthenticatedUser(
        user_id="test-user-id",
        access_token="test-access-token",
        email="test@example.com",
    )


@pytest.fixture
def mock_auth():
    """Override get_authenticated_user dependency."""
    app.dependency_overrides[get_authenticated_user] = mock_get_authenticated_user_dependency
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def mock_profile():
    """Mock profile row as stored in the users table."""
    return {
        "user_id": "test-user-id",
        "email": "test@example.com",
        "username": "tester",
        "age": 28,
        "school": "State University",
        "go_to_gym": True,
        "gym_name": "Gold's Gym",
        "bio": "Powerlifting and morning runs",
        "profile_picture": "https://example.com/avatar.jpg",
    }


@pytest.fixture
def mock_get_supabase_client():
    """Mock get_supabase_client to return a fake client."""
    with patch("gymbuddy.routes.profile.get_supabase_client") as mock:
        mock.return_value = MagicMock()
        yield mock


class TestGetProfile:
    """Tests for GET /profile"""

    @patch("gymbuddy.routes.profile.get_user_profile")
    def test_get_profile_success(self, mock_get_profile, mock_auth, mock_get_supabase_client, mock_profile):
        """Test successful profile retrieval."""
        mock_get_profile.return_value = mock_profile

        response = client.get("/profile")

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == "test-user-id"
        assert data["gymName"] == "Gold's Gym"
        assert data["goToGym"] is True
        assert data["profilePicture"] == "https://example.com/avatar.jpg"

    @patch("gymbuddy.routes.profile.get_user_profile")
    def test_get_profile_not_found(self, mock_get_profile, mock_auth, mock_get_supabase_client):
        """Test 404 when profile doesn't exist."""
        mock_get_profile.return_value = None

        response = client.get("/profile")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "not_found"
        assert response.json()["detail"]["details"] == "Profile not found"

    @patch("gymbuddy.routes.profile.get_user_profile")
    def test_get_profile_store_error(self, mock_get_profile, mock_auth, mock_get_supabase_client):
        mock_get_profile.side_effect = Exception("connection reset")

        response = client.get("/profile")

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "fetch_error"

    def test_get_profile_unauthorized(self):
        """Test 401 when no auth token provided."""
        response = client.get("/profile")

        assert response.status_code == 401


class TestSaveProfile:
    """Tests for POST /profile"""

    @patch("gymbuddy.routes.profile.save_user_profile")
    def test_save_profile_success(self, mock_save, mock_auth, mock_get_supabase_client, mock_profile):
        mock_save.return_value = mock_profile

        response = client.post("/profile", json={
            "username": "tester",
            "age": 28,
            "gymName": "Gold's Gym",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Profile saved successfully!"
        assert data["profile"]["username"] == "tester"
        assert data["profile"]["gymName"] == "Gold's Gym"

    @patch("gymbuddy.routes.profile.save_user_profile")
    def test_save_only_sends_present_fields(self, mock_save, mock_auth, mock_get_supabase_client, mock_profile):
        """Absent fields must not be overwritten."""
        mock_save.return_value = mock_profile

        client.post("/profile", json={"bio": "New bio"})

        kwargs = mock_save.call_args.kwargs
        assert kwargs["user_id"] == "test-user-id"
        assert kwargs["email"] == "test@example.com"
        assert kwargs["bio"] == "New bio"
        assert "gym_name" not in kwargs
        assert "username" not in kwargs

    @patch("gymbuddy.routes.profile.save_user_profile")
    def test_email_in_body_is_ignored(self, mock_save, mock_auth, mock_get_supabase_client, mock_profile):
        mock_save.return_value = mock_profile

        client.post("/profile", json={"email": "someone-else@example.com", "username": "x"})

        assert mock_save.call_args.kwargs["email"] == "test@example.com"

    def test_save_profile_invalid_age(self, mock_auth, mock_get_supabase_client):
        response = client.post("/profile", json={"age": -3})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    @patch("gymbuddy.routes.profile.save_user_profile")
    def test_save_profile_store_error(self, mock_save, mock_auth, mock_get_supabase_client):
        mock_save.side_effect = Exception("Failed to save profile: no data returned")

        response = client.post("/profile", json={"username": "tester"})

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "save_error"

    def test_save_profile_unauthorized(self):
        response = client.post("/profile", json={"username": "tester"})

        assert response.status_code == 401
