"""
Tests for the processing status endpoints.

System role: Verification of processing HTTP contracts and error mapping
"""

import uuid
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from edu_rag.api.deps import get_processing_service
from edu_rag.api.main import create_app
from edu_rag.application.services.processing_service import ProcessingService
from edu_rag.configs.processing import ProcessingSettings
from edu_rag.core.notifications.notifier import ProcessingStatusNotifier
from edu_rag.core.processing.state_machine import DocumentProcessingStateMachine
from edu_rag.core.processing.subject import TransitionSubject

BASE = "/api/v1/documents/doc-1/processing"


@pytest.fixture
def service(status_store, notification_settings):
    subject = TransitionSubject()
    notifier = ProcessingStatusNotifier(subject, notification_settings)
    notifier.init()
    machine = DocumentProcessingStateMachine(status_store, subject, ProcessingSettings(max_retries=1))
    return ProcessingService(machine, notifier)


@pytest.fixture
def client(service):
    app = create_app()
    app.dependency_overrides[get_processing_service] = lambda: service
    return TestClient(app)


def advance(client, status, progress, **extra):
    return client.post(f"{BASE}/advance", json={"status": status, "progress": progress, **extra})


def test_start_and_get_status(client):
    created = client.post(BASE)
    fetched = client.get(BASE)

    assert created.status_code == 201
    assert created.json()["status"] == "uploading"
    assert fetched.status_code == 200
    assert fetched.json()["estimated_time_remaining"] == pytest.approx(300.0)


def test_advance_through_stages(client):
    client.post(BASE)

    advance(client, "uploading", 100)
    advance(client, "extracting", 0)
    response = advance(client, "extracting", 50)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "extracting"
    assert body["progress"] == pytest.approx(25.0)


def test_illegal_transition_maps_to_409(client):
    client.post(BASE)

    response = advance(client, "embedding", 0)

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "ILLEGAL_TRANSITION"
    assert body["details"]["requested_status"] == "embedding"


def test_out_of_range_progress_maps_to_422(client):
    client.post(BASE)

    response = advance(client, "uploading", 150)

    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_PARAMETERS"


def test_unknown_document_maps_to_404(client):
    response = client.get("/api/v1/documents/missing/processing")

    assert response.status_code == 404
    assert response.json()["code"] == "DOCUMENT_NOT_FOUND"


def test_retry_and_retry_limit(client):
    client.post(BASE)
    advance(client, "failed", 0, error="upload interrupted")

    first = client.post(f"{BASE}/retry")
    advance(client, "failed", 0, error="upload interrupted again")
    second = client.post(f"{BASE}/retry")

    assert first.status_code == 200
    assert first.json()["retry_delay_seconds"] == pytest.approx(1.0)
    assert first.json()["status"] == "uploading"
    assert second.status_code == 409
    assert second.json()["code"] == "RETRY_LIMIT_EXCEEDED"


def test_delete_chunks(client, service):
    service.chunk_store = AsyncMock()
    service.chunk_store.delete_chunks.return_value = 4
    document_id = uuid.uuid4()

    response = client.delete(f"/api/v1/documents/{document_id}/chunks")

    assert response.status_code == 200
    assert response.json() == {"document_id": str(document_id), "removed": 4}
    service.chunk_store.delete_chunks.assert_awaited_once_with(document_id)
