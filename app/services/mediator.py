"""
Mediator
========

In-process command/query dispatcher.

Requests (commands and queries) have exactly one handler; notifications
fan out to any number of subscribers. Handlers are plain async callables
taking the message and returning the result.
"""

import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


class Mediator:
    """Routes messages to their handlers by type."""

    def __init__(self) -> None:
        self._handlers: dict[type, Handler] = {}
        self._subscribers: dict[type, list[Handler]] = {}

    def register(self, message_type: type, handler: Handler) -> None:
        """Register the single handler for ``message_type``."""
        if message_type in self._handlers:
            raise ValueError(f"Handler already registered for {message_type.__name__}")
        self._handlers[message_type] = handler

    def subscribe(self, notification_type: type, handler: Handler) -> None:
        """Add a subscriber for ``notification_type``."""
        self._subscribers.setdefault(notification_type, []).append(handler)

    async def send(self, message: Any) -> Any:
        """
        Dispatch a command or query and return the handler's result.

        Raises:
            LookupError: if no handler is registered for the message type.
        """
        handler = self._handlers.get(type(message))
        if handler is None:
            raise LookupError(f"No handler registered for {type(message).__name__}")
        return await handler(message)

    async def publish(self, notification: Any) -> None:
        """
        Deliver a notification to every subscriber.

        A failing subscriber is logged and does not stop the others.
        """
        for handler in self._subscribers.get(type(notification), []):
            try:
                await handler(notification)
            except Exception:
                logger.exception(
                    "Notification handler failed for %s",
                    type(notification).__name__,
                )
