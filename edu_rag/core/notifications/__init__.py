"""Processing notifications and delivery channels."""

from edu_rag.core.notifications.channels import CallbackChannel
from edu_rag.core.notifications.notifier import ProcessingStatusNotifier

__all__ = ["CallbackChannel", "ProcessingStatusNotifier"]
