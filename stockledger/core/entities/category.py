"""Category entity."""

from datetime import datetime

from pydantic import BaseModel, Field


class Category(BaseModel):
    """Grouping for inventory items. Names are unique ignoring case."""

    id: int | None = None
    name: str = Field(..., min_length=1)
    description: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
