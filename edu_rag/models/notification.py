"""
Processing notification models.

Dependencies: pydantic
System role: Notifier data structures and API contracts
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from edu_rag.models.processing import utc_now


class NotificationType(str, Enum):
    PROGRESS = "progress"
    COMPLETE = "complete"
    ERROR = "error"
    WARNING = "warning"


class ProcessingNotification(BaseModel):
    """Notification produced from a qualifying status transition."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    document_id: str
    type: NotificationType
    title: str
    message: str
    timestamp: datetime = Field(default_factory=utc_now)
    read: bool = False
    action_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationPreferences(BaseModel):
    """User preferences gating notification kinds and channels."""

    enable_browser_notifications: bool = True
    enable_toast_notifications: bool = True
    enable_email_notifications: bool = False
    notify_on_complete: bool = True
    notify_on_error: bool = True
    notify_on_progress: bool = False
    sound_enabled: bool = True


class NotificationPreferencesUpdate(BaseModel):
    """Partial update for notification preferences."""

    enable_browser_notifications: bool | None = None
    enable_toast_notifications: bool | None = None
    enable_email_notifications: bool | None = None
    notify_on_complete: bool | None = None
    notify_on_error: bool | None = None
    notify_on_progress: bool | None = None
    sound_enabled: bool | None = None


class NotificationListResponse(BaseModel):
    notifications: list[ProcessingNotification]
    unread_count: int
