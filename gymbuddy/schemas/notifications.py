"""
Pydantic schemas for notification endpoints.
"""

from typing import Optional
from pydantic import Field

from gymbuddy.schemas.base import CamelModel


class NotificationCreateRequest(CamelModel):
    """Request to store a notification for the caller."""
    message: str = Field(..., min_length=1, max_length=1000)


class NotificationResponse(CamelModel):
    """A stored notification."""
    id: str
    message: str
    timestamp: Optional[str] = Field(None, description="ISO-8601 timestamp, set by the database")


class NotificationCreateResponse(CamelModel):
    message: str = Field(..., examples=["Notification saved successfully!"])
    notification: NotificationResponse
