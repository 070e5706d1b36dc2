"""Pydantic models used across the project."""

from __future__ import annotations

from outliner.models.line import Attachment, Line, LineType
from outliner.models.search import Match, SearchError, SearchOutcome
from outliner.models.selection import Point, Selection
from outliner.models.snapshot import EditorSnapshot

__all__ = [
    "Attachment",
    "EditorSnapshot",
    "Line",
    "LineType",
    "Match",
    "Point",
    "SearchError",
    "SearchOutcome",
    "Selection",
]
