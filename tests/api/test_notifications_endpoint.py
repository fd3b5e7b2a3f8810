"""
Tests for the notification endpoints.

System role: Verification of notification history and preference HTTP contracts
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from edu_rag.api.deps import get_notifier
from edu_rag.api.main import create_app
from edu_rag.core.notifications.notifier import ProcessingStatusNotifier
from edu_rag.core.processing.subject import TransitionSubject
from edu_rag.models.processing import ProcessingStatus, StatusTransition


@pytest.fixture
def notifier(notification_settings):
    notifier = ProcessingStatusNotifier(TransitionSubject(), notification_settings)
    notifier.init()
    notifier.start_monitoring("doc-1")
    return notifier


@pytest.fixture
def client(notifier):
    app = create_app()
    app.dependency_overrides[get_notifier] = lambda: notifier
    return TestClient(app)


async def fail(notifier, sequence):
    await notifier.handle_transition(
        StatusTransition(
            document_id="doc-1",
            previous_status=ProcessingStatus.EXTRACTING,
            status=ProcessingStatus.FAILED,
            progress=20.0,
            stage_progress=0.0,
            error=f"failure {sequence}",
            sequence=sequence,
            estimated_time_remaining=0.0,
        )
    )


@pytest.fixture
def two_notifications(notifier):
    async def _populate():
        await fail(notifier, 1)
        await fail(notifier, 2)
        return await notifier.get_notifications()

    return asyncio.run(_populate())


def test_list_notifications(client, two_notifications):
    response = client.get("/api/v1/notifications")

    assert response.status_code == 200
    body = response.json()
    assert body["unread_count"] == 2
    assert [n["message"] for n in body["notifications"]] == ["failure 2", "failure 1"]


def test_mark_one_read_and_filter_unread(client, two_notifications):
    newest = two_notifications[0]

    marked = client.post(f"/api/v1/notifications/{newest.id}/read")
    unread = client.get("/api/v1/notifications", params={"unread_only": True})

    assert marked.status_code == 204
    assert [n["message"] for n in unread.json()["notifications"]] == ["failure 1"]
    assert unread.json()["unread_count"] == 1


def test_mark_unknown_notification(client):
    response = client.post("/api/v1/notifications/missing/read")

    assert response.status_code == 404


def test_mark_all_and_clear(client, two_notifications):
    marked = client.post("/api/v1/notifications/read-all")
    cleared = client.delete("/api/v1/notifications")
    listed = client.get("/api/v1/notifications")

    assert marked.json() == {"marked_read": 2}
    assert cleared.status_code == 204
    assert listed.json() == {"notifications": [], "unread_count": 0}


def test_preferences_round_trip(client):
    defaults = client.get("/api/v1/notifications/preferences")
    updated = client.put("/api/v1/notifications/preferences", json={"notify_on_progress": True})

    assert defaults.json()["notify_on_progress"] is False
    assert updated.status_code == 200
    assert updated.json()["notify_on_progress"] is True
    assert updated.json()["notify_on_complete"] is True
