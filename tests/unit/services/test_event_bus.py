"""Tests for the in-process event bus."""

from unittest.mock import AsyncMock

import pytest

from stockledger.core.entities.events import InventoryEvent, InventoryEventType
from stockledger.core.services.event_bus import EventBus, get_event_bus, reset_event_bus


def _event(event_type=InventoryEventType.ITEM_CHANGED, *item_ids):
    return InventoryEvent(event_type=event_type, item_ids=item_ids or (1,))


class TestEventBus:
    async def test_publish_reaches_subscribers_of_type(self):
        bus = EventBus()
        on_item = AsyncMock()
        on_categories = AsyncMock()
        bus.subscribe(InventoryEventType.ITEM_CHANGED, on_item)
        bus.subscribe(InventoryEventType.CATEGORIES_CHANGED, on_categories)

        event = _event()
        await bus.publish(event)

        on_item.assert_awaited_once_with(event)
        on_categories.assert_not_awaited()

    async def test_publish_without_subscribers(self):
        await EventBus().publish(_event())

    async def test_failing_subscriber_does_not_block_others(self):
        bus = EventBus()
        broken = AsyncMock(side_effect=RuntimeError("boom"))
        healthy = AsyncMock()
        bus.subscribe(InventoryEventType.ITEMS_DELETED, broken)
        bus.subscribe(InventoryEventType.ITEMS_DELETED, healthy)

        await bus.publish(_event(InventoryEventType.ITEMS_DELETED, 3, 4))

        healthy.assert_awaited_once()

    def test_duplicate_subscription_ignored(self):
        bus = EventBus()
        callback = AsyncMock()
        bus.subscribe(InventoryEventType.ITEM_CHANGED, callback)
        bus.subscribe(InventoryEventType.ITEM_CHANGED, callback)
        assert bus.subscriber_count(InventoryEventType.ITEM_CHANGED) == 1

    def test_unsubscribe(self):
        bus = EventBus()
        callback = AsyncMock()
        bus.subscribe(InventoryEventType.ITEM_CHANGED, callback)
        bus.unsubscribe(InventoryEventType.ITEM_CHANGED, callback)
        bus.unsubscribe(InventoryEventType.ITEM_CHANGED, callback)
        assert bus.subscriber_count(InventoryEventType.ITEM_CHANGED) == 0

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            EventBus().subscribe(InventoryEventType.ITEM_CHANGED, "not a callback")


def test_global_bus_reset():
    bus = get_event_bus()
    assert get_event_bus() is bus
    reset_event_bus()
    assert get_event_bus() is not bus
