"""
Pydantic schemas for friend endpoints.

A friendship is stored as two symmetric edges, one owned by each user.
"""

from typing import Optional
from pydantic import Field

from gymbuddy.schemas.base import CamelModel


class FriendAddRequest(CamelModel):
    """
    Request to add a friend by id or by email.

    At least one of friend_id / friend_email must be provided;
    friend_id wins when both are sent.
    """
    friend_id: Optional[str] = Field(None, description="User UUID of the friend")
    friend_email: Optional[str] = Field(None, description="Email of the friend")


class FriendResponse(CamelModel):
    """One edge of the caller's friend list."""
    friend_id: str = Field(..., description="User UUID of the friend")
    name: str = Field(..., description="Friend's username at the time the edge was created")
    added_at: Optional[str] = Field(None, description="ISO-8601 timestamp when the friend was added")


class FriendAddResponse(CamelModel):
    """Response after adding a friend."""
    message: str = Field(..., examples=["Friend added successfully!"])
    friend: FriendResponse


class FriendDeleteResponse(CamelModel):
    """Response after removing a friend (both edges)."""
    message: str = Field(..., examples=["Friend removed successfully!"])
