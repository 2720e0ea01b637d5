"""
In-process event bus for inventory mutation events.

Use cases publish an event after every successful write; views, caches or
notifiers subscribe to the event types they care about instead of guessing
which data went stale.
"""

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

from stockledger.config import get_logger
from stockledger.core.entities.events import InventoryEvent, InventoryEventType

logger = get_logger(__name__)

Subscriber = Callable[[InventoryEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Async publish/subscribe keyed by event type."""

    def __init__(self) -> None:
        self._subscribers: dict[InventoryEventType, list[Subscriber]] = {}

    def subscribe(self, event_type: InventoryEventType, callback: Subscriber) -> None:
        if not callable(callback):
            raise TypeError("Callback must be a callable async function.")
        callbacks = self._subscribers.setdefault(event_type, [])
        if callback in callbacks:
            logger.warning(
                "subscriber_already_registered",
                event_type=event_type.value,
                callback=getattr(callback, "__name__", repr(callback)),
            )
            return
        callbacks.append(callback)

    def unsubscribe(self, event_type: InventoryEventType, callback: Subscriber) -> None:
        callbacks = self._subscribers.get(event_type)
        if not callbacks or callback not in callbacks:
            return
        callbacks.remove(callback)
        if not callbacks:
            del self._subscribers[event_type]

    def subscriber_count(self, event_type: InventoryEventType) -> int:
        return len(self._subscribers.get(event_type, []))

    async def publish(self, event: InventoryEvent) -> None:
        """
        Deliver an event to every subscriber of its type.

        Subscribers run concurrently. A failing subscriber is logged and
        does not affect the others or the publisher.
        """
        callbacks = list(self._subscribers.get(event.event_type, []))
        logger.debug(
            "event_published",
            event_type=event.event_type.value,
            item_ids=list(event.item_ids),
            subscribers=len(callbacks),
        )
        if not callbacks:
            return

        results = await asyncio.gather(
            *(callback(event) for callback in callbacks), return_exceptions=True
        )
        for callback, result in zip(callbacks, results):
            if isinstance(result, Exception):
                logger.error(
                    "event_subscriber_failed",
                    event_type=event.event_type.value,
                    callback=getattr(callback, "__name__", repr(callback)),
                    error=str(result),
                )


_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the process-wide event bus."""
    global _bus
    if _bus is None:
        _bus = EventBus()
    return _bus


def reset_event_bus() -> None:
    """Drop the process-wide event bus (for testing)."""
    global _bus
    _bus = None
