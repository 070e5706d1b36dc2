"""Search-related models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SearchErrorKind = Literal["invalid_pattern", "timeout"]


class Match(BaseModel):
    """A single-line match span `[start, end)` on `line_index`."""

    line_index: int
    start: int
    end: int
    text: str
    group_values: list[str | None] | None = None
    named_groups: dict[str, str | None] | None = None


class SearchError(BaseModel):
    """Recoverable search failure surfaced as state rather than raised."""

    kind: SearchErrorKind
    message: str


class SearchOutcome(BaseModel):
    """Result of one match computation."""

    matches: list[Match] = Field(default_factory=list)
    error: SearchError | None = None
