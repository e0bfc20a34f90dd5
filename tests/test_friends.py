"""
Tests for friend endpoints.

Tests cover:
- Adding by id and by email
- Validation failures (400) and unknown users (404)
- Listing and removal
"""

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError
from unittest.mock import MagicMock, patch
from gymbuddy.main import app
from gymbuddy.auth.dependencies import get_authenticated_user, AuthenticatedUser
from gymbuddy.services import FriendNotFoundError, InvalidFriendRequestError

client = TestClient(app)


async def mock_get_authenticated_user_dependency():
    return AuthenticatedUser(
        user_id="test-user-id",
        access_token="test-access-token",
        email="test@example.com",
    )


@pytest.fixture
def mock_auth():
    app.dependency_overrides[get_authenticated_user] = mock_get_authenticated_user_dependency
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def mock_get_supabase_client():
    with patch("gymbuddy.routes.friends.get_supabase_client") as mock:
        mock.return_value = MagicMock()
        yield mock


class TestAddFriend:
    """Tests for POST /friends"""

    @patch("gymbuddy.routes.friends.add_friend")
    def test_add_by_id(self, mock_add, mock_auth, mock_get_supabase_client):
        mock_add.return_value = {
            "friend_id": "friend-1",
            "name": "goldie",
            "added_at": "2025-03-14T10:00:00+00:00",
        }

        response = client.post("/friends", json={"friendId": "friend-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Friend added successfully!"
        assert data["friend"]["friendId"] == "friend-1"
        assert data["friend"]["name"] == "goldie"
        assert mock_add.call_args.kwargs["user_id"] == "test-user-id"

    @patch("gymbuddy.routes.friends.add_friend")
    def test_add_by_email(self, mock_add, mock_auth, mock_get_supabase_client):
        mock_add.return_value = {"friend_id": "friend-1", "name": "goldie", "added_at": None}

        response = client.post("/friends", json={"friendEmail": "gold@example.com"})

        assert response.status_code == 200
        assert mock_add.call_args.kwargs["friend_email"] == "gold@example.com"
        assert mock_add.call_args.kwargs["friend_id"] is None

    @patch("gymbuddy.routes.friends.add_friend")
    def test_missing_identifier(self, mock_add, mock_auth, mock_get_supabase_client):
        response = client.post("/friends", json={})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_request"
        mock_add.assert_not_called()

    @patch("gymbuddy.routes.friends.add_friend")
    def test_unknown_email(self, mock_add, mock_auth, mock_get_supabase_client):
        mock_add.side_effect = FriendNotFoundError("No user found with that email")

        response = client.post("/friends", json={"friendEmail": "nobody@example.com"})

        assert response.status_code == 404
        assert response.json()["detail"]["details"] == "No user found with that email"

    @patch("gymbuddy.routes.friends.add_friend")
    def test_already_friends(self, mock_add, mock_auth, mock_get_supabase_client):
        mock_add.side_effect = InvalidFriendRequestError("Already friends with this user")

        response = client.post("/friends", json={"friendId": "friend-1"})

        assert response.status_code == 400
        assert response.json()["detail"]["details"] == "Already friends with this user"

    @patch("gymbuddy.routes.friends.add_friend")
    def test_concurrent_duplicate_edge(self, mock_add, mock_auth, mock_get_supabase_client):
        mock_add.side_effect = APIError({
            "message": "duplicate key value violates unique constraint",
            "code": "23505",
            "details": None,
            "hint": None,
        })

        response = client.post("/friends", json={"friendId": "friend-1"})

        assert response.status_code == 400
        assert response.json()["detail"]["details"] == "Already friends with this user"

    @patch("gymbuddy.routes.friends.add_friend")
    def test_store_error(self, mock_add, mock_auth, mock_get_supabase_client):
        mock_add.side_effect = Exception("RPC add_friend_pair failed")

        response = client.post("/friends", json={"friendId": "friend-1"})

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "add_friend_error"


class TestListFriends:
    """Tests for GET /friends"""

    @patch("gymbuddy.routes.friends.get_friends")
    def test_list(self, mock_get, mock_auth, mock_get_supabase_client):
        mock_get.return_value = [
            {"friend_id": "f1", "name": "goldie", "added_at": "2025-03-14T10:00:00+00:00"},
            {"friend_id": "f2", "name": None, "added_at": None},
        ]

        response = client.get("/friends")

        assert response.status_code == 200
        data = response.json()
        assert [f["friendId"] for f in data] == ["f1", "f2"]
        assert data[1]["name"] == "Unknown User"

    @patch("gymbuddy.routes.friends.get_friends")
    def test_empty(self, mock_get, mock_auth, mock_get_supabase_client):
        mock_get.return_value = []

        response = client.get("/friends")

        assert response.status_code == 200
        assert response.json() == []

    def test_unauthorized(self):
        assert client.get("/friends").status_code == 401


class TestRemoveFriend:
    """Tests for DELETE /friends/{friend_id}"""

    @patch("gymbuddy.routes.friends.remove_friend")
    def test_remove(self, mock_remove, mock_auth, mock_get_supabase_client):
        response = client.delete("/friends/f1")

        assert response.status_code == 200
        assert response.json()["message"] == "Friend removed successfully!"
        args = mock_remove.call_args.args
        assert args[1:] == ("test-user-id", "f1")

    @patch("gymbuddy.routes.friends.remove_friend")
    def test_not_friends(self, mock_remove, mock_auth, mock_get_supabase_client):
        mock_remove.side_effect = FriendNotFoundError("Not friends with this user")

        response = client.delete("/friends/f1")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "not_found"
