"""Editor engine: cursor, history and structural editing operations."""

from __future__ import annotations

from outliner.editor.cursor import compare_points, normalize_selection, selection_line_range
from outliner.editor.engine import OutlineEditor, ReconcileStats
from outliner.editor.history import HistoryManager
from outliner.editor.text_input import handle_leading_space_indent, process_committed_text

__all__ = [
    "HistoryManager",
    "OutlineEditor",
    "ReconcileStats",
    "compare_points",
    "handle_leading_space_indent",
    "normalize_selection",
    "process_committed_text",
    "selection_line_range",
]
