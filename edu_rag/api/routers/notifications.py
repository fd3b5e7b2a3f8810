"""
Notification API endpoints.

Routes: GET /notifications, POST /notifications/{id}/read,
POST /notifications/read-all, DELETE /notifications,
GET /notifications/preferences, PUT /notifications/preferences

Dependencies: edu_rag.core.notifications
System role: Notification history HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from edu_rag.api.deps import get_notifier
from edu_rag.core.notifications.notifier import ProcessingStatusNotifier
from edu_rag.models.notification import (
    NotificationListResponse,
    NotificationPreferences,
    NotificationPreferencesUpdate,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False),
    notifier: ProcessingStatusNotifier = Depends(get_notifier),
) -> NotificationListResponse:
    """List notifications, newest first."""
    if unread_only:
        notifications = await notifier.get_unread()
    else:
        notifications = await notifier.get_notifications()
    return NotificationListResponse(
        notifications=notifications,
        unread_count=await notifier.unread_count(),
    )


@router.post("/read-all")
async def mark_all_read(
    notifier: ProcessingStatusNotifier = Depends(get_notifier),
) -> dict:
    changed = await notifier.mark_all_as_read()
    return {"marked_read": changed}


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: str,
    notifier: ProcessingStatusNotifier = Depends(get_notifier),
) -> None:
    """
    Mark one notification as read.

    Raises:
        HTTPException(404): Notification not in history
    """
    if not await notifier.mark_as_read(notification_id):
        raise HTTPException(status_code=404, detail=f"Notification {notification_id} not found")


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_notifications(
    notifier: ProcessingStatusNotifier = Depends(get_notifier),
) -> None:
    await notifier.clear_notifications()


@router.get("/preferences", response_model=NotificationPreferences)
async def get_preferences(
    notifier: ProcessingStatusNotifier = Depends(get_notifier),
) -> NotificationPreferences:
    return notifier.preferences


@router.put("/preferences", response_model=NotificationPreferences)
async def update_preferences(
    update: NotificationPreferencesUpdate,
    notifier: ProcessingStatusNotifier = Depends(get_notifier),
) -> NotificationPreferences:
    """Apply a partial preferences update."""
    return notifier.update_preferences(update)
