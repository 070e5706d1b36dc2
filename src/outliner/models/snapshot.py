"""Snapshot interchange format.

The same shape is used for undo/redo history and for collaboration sync, so it must stay
plain and JSON-serializable. Serialized keys are camelCase (`lineIndex`, `scrollTop`) to
match peers speaking the wire format; snake_case input is accepted too.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from outliner.models.line import Line
from outliner.models.selection import Point, Selection


class EditorSnapshot(BaseModel):
    """Full editor state at a point in time."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    lines: list[Line] = Field(default_factory=list)
    cursor: Point | None = None
    selection: Selection | None = None
    scroll_top: float = 0.0
    scroll_left: float = 0.0

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
