"""Mutation events published after successful writes."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class InventoryEventType(str, Enum):
    """What changed. Subscribers refresh the matching views."""

    ITEM_CHANGED = "item_changed"
    TRANSACTIONS_CHANGED = "transactions_changed"
    ITEMS_DELETED = "items_deleted"
    CATEGORIES_CHANGED = "categories_changed"


class InventoryEvent(BaseModel):
    """A single change notification."""

    model_config = ConfigDict(frozen=True)

    event_type: InventoryEventType
    item_ids: tuple[int, ...] = ()
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=datetime.utcnow)
