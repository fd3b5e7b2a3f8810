"""
In-process notification delivery channels.

CallbackChannel adapts any sync or async callable (a websocket push,
a toast queue, a sound trigger) to the DeliveryChannel contract.

Dependencies: inspect (stdlib), edu_rag.models.notification
System role: Delivery adapters for the processing notifier
"""

import inspect
from collections.abc import Awaitable, Callable

from edu_rag.models.notification import ProcessingNotification

IN_APP_CHANNEL = "in_app"
BROWSER_CHANNEL = "browser"
SOUND_CHANNEL = "sound"
EMAIL_CHANNEL = "email"

NotificationCallback = Callable[[ProcessingNotification], Awaitable[bool | None] | bool | None]


class CallbackChannel:
    """Delivers notifications by calling a user-supplied function."""

    def __init__(self, name: str, callback: NotificationCallback) -> None:
        self.name = name
        self._callback = callback

    async def deliver(self, notification: ProcessingNotification) -> bool:
        """
        Invoke the callback.

        A callback returning None counts as delivered; only an explicit
        False reports failure.
        """
        outcome = self._callback(notification)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome is not False

    def __repr__(self) -> str:
        return f"CallbackChannel(name={self.name!r})"
