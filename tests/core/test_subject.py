"""
Tests for TransitionSubject.

System role: Verification of observer fan-out and isolation
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from edu_rag.core.processing.subject import TransitionSubject
from edu_rag.models.processing import ProcessingStatus, StatusTransition


def make_transition(sequence: int = 1) -> StatusTransition:
    return StatusTransition(
        document_id="doc-1",
        previous_status=None,
        status=ProcessingStatus.UPLOADING,
        progress=0.0,
        stage_progress=0.0,
        sequence=sequence,
        estimated_time_remaining=300.0,
    )


@pytest.mark.asyncio
async def test_publish_reaches_sync_and_async_observers():
    subject = TransitionSubject()
    sync_observer = MagicMock(return_value=None)
    async_observer = AsyncMock()
    subject.subscribe(sync_observer)
    subject.subscribe(async_observer)
    transition = make_transition()

    await subject.publish(transition)

    sync_observer.assert_called_once_with(transition)
    async_observer.assert_awaited_once_with(transition)


@pytest.mark.asyncio
async def test_failing_observer_does_not_block_others():
    subject = TransitionSubject()
    received = []
    subject.subscribe(MagicMock(side_effect=RuntimeError("observer bug")))
    subject.subscribe(received.append)

    await subject.publish(make_transition())

    assert len(received) == 1


@pytest.mark.asyncio
async def test_unsubscribe_function_stops_delivery():
    subject = TransitionSubject()
    received = []
    unsubscribe = subject.subscribe(received.append)

    unsubscribe()
    await subject.publish(make_transition())

    assert received == []
    assert subject.observer_count == 0


def test_subscribing_twice_registers_once():
    subject = TransitionSubject()
    observer = MagicMock()

    subject.subscribe(observer)
    subject.subscribe(observer)

    assert subject.observer_count == 1
