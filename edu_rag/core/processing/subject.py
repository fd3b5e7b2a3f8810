"""
Publish-subscribe subject for processing transitions.

The state machine publishes; the notifier and any other observer
subscribe. Subscriber errors are logged and never reach the publisher.

Dependencies: asyncio (stdlib)
System role: Decouples the state machine from its observers
"""

import inspect
import logging
from collections.abc import Awaitable, Callable

from edu_rag.models.processing import StatusTransition

logger = logging.getLogger(__name__)

TransitionObserver = Callable[[StatusTransition], Awaitable[None] | None]


class TransitionSubject:
    """Fan-out of StatusTransition events to registered observers."""

    def __init__(self) -> None:
        self._observers: list[TransitionObserver] = []

    def subscribe(self, observer: TransitionObserver) -> Callable[[], None]:
        """
        Register an observer.

        Returns:
            Callable[[], None]: Unsubscribe function
        """
        if observer not in self._observers:
            self._observers.append(observer)
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: TransitionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    async def publish(self, transition: StatusTransition) -> None:
        """Deliver a transition to every observer in subscription order."""
        for observer in list(self._observers):
            try:
                outcome = observer(transition)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(
                    f"{__name__}:publish - Observer failed",
                    extra={
                        "document_id": transition.document_id,
                        "sequence": transition.sequence,
                        "error": str(e),
                    },
                    exc_info=True,
                )
