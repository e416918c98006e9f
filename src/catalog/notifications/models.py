"""Pydantic models for notification events."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

BOOK_ADDED = "BOOK_ADDED"


class NotificationEvent(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    topic: str
    payload: Any
    emitted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
