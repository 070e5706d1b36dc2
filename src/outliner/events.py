"""Change events published by the editor engine.

Every `document_version` bump produces one event. Collaboration and persistence layers
subscribe to these to learn that "something changed" without diffing snapshots; events can be
recorded to JSONL for replay and debugging.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """High-level event categories."""

    EDIT = "edit"
    STRUCTURE = "structure"
    HISTORY = "history"
    SEARCH = "search"
    SYNC = "sync"


class DocumentEvent(BaseModel):
    """A single document change."""

    session: str
    version: int = Field(ge=1)
    ts: datetime = Field(default_factory=datetime.utcnow)

    event_type: EventType
    operation: str

    line_count: int = Field(ge=1)
    metadata: dict[str, str | int | float | bool | None] = Field(default_factory=dict)
