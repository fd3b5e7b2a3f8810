"""
Notification delivery configuration.

Dependencies: pydantic, pydantic_settings
System role: Notifier history and delivery retry configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from edu_rag.configs.base import env_config


class NotificationSettings(BaseSettings):
    """Processing notification settings."""

    model_config = env_config("NOTIFY_")

    history_limit: int = Field(default=100, description="Notifications kept in history", ge=1)
    delivery_attempts: int = Field(default=3, description="Attempts per channel delivery", ge=1)
    delivery_backoff_initial: float = Field(default=0.5, description="First delivery retry wait", ge=0)
    delivery_backoff_max: float = Field(default=5.0, description="Delivery retry wait ceiling", ge=0)
    delivery_timeout_seconds: float = Field(default=10.0, description="Deadline for one delivery attempt", gt=0)
    tracked_documents_limit: int = Field(
        default=1000,
        description="Documents whose last seen sequence is remembered for de-duplication",
        ge=1,
    )

    email_sender: str = Field(
        default="no-reply@edu-rag.local",
        description="From address for email notifications",
    )
    email_recipient: str | None = Field(
        default=None,
        description="Address receiving email notifications; email channel disabled when unset",
    )
    ses_region: str = Field(default="ap-southeast-2", description="AWS region for SES")
    action_url_template: str = Field(
        default="/documents/{document_id}",
        description="Link attached to complete/error notifications",
    )
