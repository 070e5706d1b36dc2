"""Cursor point and selection models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Point(BaseModel):
    """A caret position: `(line_index, char_index)`."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    line_index: int = Field(default=0, ge=0)
    char_index: int = Field(default=0, ge=0)


class Selection(BaseModel):
    """Two cursor points in any order. Use `normalize_selection` before slicing."""

    model_config = ConfigDict(frozen=True)

    start: Point
    end: Point

    def is_empty(self) -> bool:
        return self.start == self.end
