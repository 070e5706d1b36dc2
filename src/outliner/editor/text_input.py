"""Committed text input handling.

Input-method commits arrive here before reaching `OutlineEditor.insert_text`. Typing only
spaces (ASCII or ideographic) at the start of a line is an indent gesture rather than text.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from outliner.utils.text import normalize_newlines

if TYPE_CHECKING:
    from outliner.editor.engine import OutlineEditor

_INDENT_SPACES_RE = re.compile(r"^[ 　]+$")


def handle_leading_space_indent(editor: "OutlineEditor", text: str) -> bool:
    """Indent instead of inserting when `text` is only spaces typed at column 0.

    Returns:
        True when the input was consumed as an indent change.
    """

    if not text:
        return False
    first, *rest = text.split("\n")
    if not _INDENT_SPACES_RE.match(first):
        return False
    if any(rest):
        return False
    if editor.cursor.char_index != 0:
        return False
    editor.change_indent(
        len(first),
        apply_to_selection=editor.has_selection(),
        include_children=False,
    )
    return True


def process_committed_text(editor: "OutlineEditor", text: str) -> bool:
    """Apply committed input text to the editor. Returns False for empty input."""

    if not text:
        return False
    normalized = normalize_newlines(text)
    if handle_leading_space_indent(editor, normalized):
        return True
    editor.insert_text(normalized)
    return True
