"""
Processing status notifier.

Subscribes to state machine transitions, turns qualifying ones into
user notifications and keeps a bounded history with read state.

Channel delivery never runs inside the publishing call: each
notification is handed to a background task that fans out to every
enabled channel concurrently, with a deadline and retries per attempt.
A slow or failing channel therefore delays neither the state machine
nor the other channels.

Dependencies: tenacity, edu_rag.core.processing.subject, edu_rag.core.notifications.channels
System role: Observer between document processing and the user
"""

import asyncio
import inspect
import logging
from collections import OrderedDict, deque
from collections.abc import Awaitable, Callable

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from edu_rag.configs.notifications import NotificationSettings
from edu_rag.core.exceptions import DeliveryError
from edu_rag.core.interfaces import DeliveryChannel
from edu_rag.core.notifications.channels import (
    BROWSER_CHANNEL,
    EMAIL_CHANNEL,
    IN_APP_CHANNEL,
    SOUND_CHANNEL,
)
from edu_rag.core.processing.subject import TransitionSubject
from edu_rag.models.notification import (
    NotificationPreferences,
    NotificationPreferencesUpdate,
    NotificationType,
    ProcessingNotification,
)
from edu_rag.models.processing import ProcessingStatus, StatusTransition

logger = logging.getLogger(__name__)

StatusListener = Callable[[StatusTransition], Awaitable[None] | None]

STAGE_LABELS = {
    ProcessingStatus.UPLOADING: "Uploading",
    ProcessingStatus.EXTRACTING: "Extracting text",
    ProcessingStatus.CHUNKING: "Chunking content",
    ProcessingStatus.EMBEDDING: "Generating embeddings",
}

PROGRESS_STAGES = (
    ProcessingStatus.EXTRACTING,
    ProcessingStatus.CHUNKING,
    ProcessingStatus.EMBEDDING,
)


class ProcessingStatusNotifier:
    """
    Notification service for document processing.

    Lifecycle is explicit: init() subscribes to the transition subject,
    shutdown() unsubscribes and drops monitoring state. Only documents
    registered with start_monitoring() are observed.
    """

    def __init__(
        self,
        subject: TransitionSubject,
        settings: NotificationSettings | None = None,
        preferences: NotificationPreferences | None = None,
        channels: list[DeliveryChannel] | None = None,
    ) -> None:
        """
        Initialize notifier.

        Args:
            subject: Transition subject published by the state machine
            settings: History size and delivery retry policy (defaults if None)
            preferences: Initial user preferences (defaults if None)
            channels: Delivery channels to fan out to
        """
        self.subject = subject
        self.settings = settings or NotificationSettings()
        self.preferences = preferences or NotificationPreferences()
        self.channels: list[DeliveryChannel] = list(channels or [])

        self._history: deque[ProcessingNotification] = deque(maxlen=self.settings.history_limit)
        self._lock = asyncio.Lock()
        self._monitored: set[str] = set()
        self._last_sequence: OrderedDict[str, int] = OrderedDict()
        self._deliveries: set[asyncio.Task] = set()
        self._listeners: list[StatusListener] = []
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def init(self) -> None:
        """Subscribe to the transition subject. Calling twice is a no-op."""
        if self._initialized:
            return
        self.subject.subscribe(self.handle_transition)
        self._initialized = True
        logger.info(
            f"{__name__}:init - Notifier subscribed",
            extra={"channels": [channel.name for channel in self.channels]},
        )

    def shutdown(self) -> None:
        """Unsubscribe, cancel pending deliveries and forget monitored documents and listeners."""
        if not self._initialized:
            return
        self.subject.unsubscribe(self.handle_transition)
        for task in list(self._deliveries):
            task.cancel()
        self._monitored.clear()
        self._last_sequence.clear()
        self._listeners.clear()
        self._initialized = False
        logger.info(f"{__name__}:shutdown - Notifier unsubscribed")

    def add_channel(self, channel: DeliveryChannel) -> None:
        self.channels.append(channel)

    def start_monitoring(self, document_id: str) -> None:
        self._monitored.add(document_id)

    def stop_monitoring(self, document_id: str) -> None:
        self._monitored.discard(document_id)
        self._last_sequence.pop(document_id, None)

    def is_monitoring(self, document_id: str) -> bool:
        return document_id in self._monitored

    @property
    def monitored_documents(self) -> set[str]:
        return set(self._monitored)

    def add_status_listener(self, listener: StatusListener) -> Callable[[], None]:
        """
        Register a listener for every transition of monitored documents.

        Returns:
            Callable[[], None]: Function removing the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    @property
    def pending_deliveries(self) -> int:
        return len(self._deliveries)

    async def handle_transition(self, transition: StatusTransition) -> None:
        """
        Process one published transition.

        Transitions at or below the last sequence seen for the document
        are ignored. Channel delivery is scheduled in the background.
        """
        if transition.document_id not in self._monitored:
            return
        if not self._record_sequence(transition.document_id, transition.sequence):
            return

        await self._notify_listeners(transition)

        notification = self.build_notification(transition)
        if notification is None:
            return

        async with self._lock:
            self._history.appendleft(notification)

        self._schedule_delivery(notification)

    def _record_sequence(self, document_id: str, sequence: int) -> bool:
        last = self._last_sequence.get(document_id)
        if last is not None and sequence <= last:
            return False
        self._last_sequence[document_id] = sequence
        self._last_sequence.move_to_end(document_id)
        while len(self._last_sequence) > self.settings.tracked_documents_limit:
            self._last_sequence.popitem(last=False)
        return True

    def _schedule_delivery(self, notification: ProcessingNotification) -> None:
        if not self.channels:
            return
        task = asyncio.create_task(self.dispatch(notification), name=f"notify-{notification.id}")
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def wait_for_deliveries(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._deliveries:
            await asyncio.gather(*list(self._deliveries), return_exceptions=True)

    def build_notification(self, transition: StatusTransition) -> ProcessingNotification | None:
        """
        Apply notification policy to a transition.

        Returns:
            ProcessingNotification | None: The notification, or None if the transition does not qualify
        """
        prefs = self.preferences
        metadata = {
            "status": transition.status.value,
            "progress": round(transition.progress, 1),
            "retry_count": transition.retry_count,
            "sequence": transition.sequence,
        }
        action_url = self.settings.action_url_template.format(document_id=transition.document_id)

        if transition.status == ProcessingStatus.COMPLETED:
            if not prefs.notify_on_complete:
                return None
            return ProcessingNotification(
                document_id=transition.document_id,
                type=NotificationType.COMPLETE,
                title="Processing Complete",
                message="Document is ready for search",
                action_url=action_url,
                metadata=metadata,
            )

        if transition.status == ProcessingStatus.FAILED:
            if not prefs.notify_on_error:
                return None
            return ProcessingNotification(
                document_id=transition.document_id,
                type=NotificationType.ERROR,
                title="Processing Failed",
                message=transition.error or "Document processing failed",
                action_url=action_url,
                metadata=metadata,
            )

        if transition.is_retry:
            if not prefs.notify_on_error:
                return None
            return ProcessingNotification(
                document_id=transition.document_id,
                type=NotificationType.WARNING,
                title="Retrying Processing",
                message=f"Retry attempt {transition.retry_count}: {STAGE_LABELS[transition.status]}",
                metadata=metadata,
            )

        if transition.is_status_change and transition.status in PROGRESS_STAGES:
            if not prefs.notify_on_progress:
                return None
            return ProcessingNotification(
                document_id=transition.document_id,
                type=NotificationType.PROGRESS,
                title="Processing Update",
                message=f"{STAGE_LABELS[transition.status]} ({transition.progress:.0f}% complete)",
                metadata=metadata,
            )

        return None

    def channel_enabled(self, channel_name: str, notification: ProcessingNotification) -> bool:
        prefs = self.preferences
        if channel_name == IN_APP_CHANNEL:
            return prefs.enable_toast_notifications
        if channel_name == BROWSER_CHANNEL:
            return prefs.enable_browser_notifications
        if channel_name == SOUND_CHANNEL:
            return prefs.sound_enabled and notification.type == NotificationType.COMPLETE
        if channel_name == EMAIL_CHANNEL:
            return prefs.enable_email_notifications
        return True

    async def dispatch(self, notification: ProcessingNotification) -> dict[str, bool]:
        """
        Fan a notification out to every enabled channel concurrently.

        Each attempt is bounded by delivery_timeout_seconds. Failures are
        retried, then logged; they never propagate.

        Returns:
            dict[str, bool]: Delivery outcome per attempted channel
        """
        enabled = [c for c in self.channels if self.channel_enabled(c.name, notification)]
        results = await asyncio.gather(
            *(self._deliver_with_retry(channel, notification) for channel in enabled),
            return_exceptions=True,
        )
        return {channel.name: result is True for channel, result in zip(enabled, results)}

    async def _deliver_with_retry(
        self,
        channel: DeliveryChannel,
        notification: ProcessingNotification,
    ) -> bool:
        attempts = self.settings.delivery_attempts
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(Exception),
                stop=stop_after_attempt(attempts),
                wait=wait_exponential(
                    multiplier=self.settings.delivery_backoff_initial,
                    max=self.settings.delivery_backoff_max,
                ),
                before_sleep=lambda retry_state: logger.warning(
                    f"{__name__}:_deliver_with_retry - Retry {retry_state.attempt_number}/{attempts} "
                    f"on channel {channel.name}"
                ),
                reraise=True,
            ):
                with attempt:
                    delivered = await asyncio.wait_for(
                        channel.deliver(notification),
                        timeout=self.settings.delivery_timeout_seconds,
                    )
                    if not delivered:
                        raise DeliveryError(channel.name, "Channel reported delivery failure")
        except Exception as e:
            logger.error(
                f"{__name__}:_deliver_with_retry - Delivery failed",
                extra={
                    "channel": channel.name,
                    "notification_id": notification.id,
                    "document_id": notification.document_id,
                    "error": str(e),
                },
            )
            return False
        return True

    async def _notify_listeners(self, transition: StatusTransition) -> None:
        for listener in list(self._listeners):
            try:
                outcome = listener(transition)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(
                    f"{__name__}:_notify_listeners - Status listener failed",
                    extra={"document_id": transition.document_id, "error": str(e)},
                )

    async def get_notifications(self) -> list[ProcessingNotification]:
        """Return history, newest first."""
        async with self._lock:
            return list(self._history)

    async def get_unread(self) -> list[ProcessingNotification]:
        async with self._lock:
            return [n for n in self._history if not n.read]

    async def unread_count(self) -> int:
        async with self._lock:
            return sum(1 for n in self._history if not n.read)

    async def mark_as_read(self, notification_id: str) -> bool:
        """
        Mark one notification as read.

        Returns:
            bool: False if the notification is not in history
        """
        async with self._lock:
            for index, notification in enumerate(self._history):
                if notification.id == notification_id:
                    self._history[index] = notification.model_copy(update={"read": True})
                    return True
        return False

    async def mark_all_as_read(self) -> int:
        """Mark every notification as read and return how many changed."""
        async with self._lock:
            changed = 0
            for index, notification in enumerate(self._history):
                if not notification.read:
                    self._history[index] = notification.model_copy(update={"read": True})
                    changed += 1
            return changed

    async def clear_notifications(self) -> None:
        async with self._lock:
            self._history.clear()

    def update_preferences(
        self,
        update: NotificationPreferencesUpdate | NotificationPreferences,
    ) -> NotificationPreferences:
        """Apply a partial preferences update and return the result."""
        changes = update.model_dump(exclude_none=True)
        self.preferences = self.preferences.model_copy(update=changes)
        return self.preferences
