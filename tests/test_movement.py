"""Tests for caret movement and selection extension."""

from __future__ import annotations

from outliner.config import Settings
from outliner.editor.cursor import compare_points, normalize_selection
from outliner.editor.engine import OutlineEditor
from outliner.models.selection import Point, Selection
from outliner.utils.text import find_word_boundary


def pt(line_index: int, char_index: int) -> Point:
    return Point(line_index=line_index, char_index=char_index)


def cursor_of(editor: OutlineEditor) -> tuple[int, int]:
    return editor.cursor.line_index, editor.cursor.char_index


def test_normalized_selection_is_order_independent() -> None:
    """It should order endpoints so that start <= end."""

    a, b = pt(2, 1), pt(0, 4)
    forward = normalize_selection(Selection(start=b, end=a))
    backward = normalize_selection(Selection(start=a, end=b))

    assert forward == backward
    assert forward is not None
    assert compare_points(forward.start, forward.end) <= 0
    assert normalize_selection(None) is None


def test_horizontal_movement_wraps_across_lines() -> None:
    """It should continue onto the adjacent line at either edge."""

    editor = OutlineEditor.from_outline(["ab", "cd"])
    editor.set_cursor(0, 2)

    editor.move_cursor_horizontal(1)
    assert cursor_of(editor) == (1, 0)

    editor.move_cursor_horizontal(-1)
    assert cursor_of(editor) == (0, 2)


def test_horizontal_movement_skips_hidden_lines() -> None:
    """It should jump over collapsed descendants."""

    editor = OutlineEditor.from_outline([("A", 0), ("a1", 1), ("B", 0)])
    editor.toggle_collapse(0)
    editor.set_cursor(0, 1)

    editor.move_cursor_horizontal(1)

    assert cursor_of(editor) == (2, 0)


def test_extending_then_collapsing_selection() -> None:
    """It should anchor extension at the first caret and collapse on plain movement."""

    editor = OutlineEditor.from_outline(["hello"])
    editor.move_cursor_horizontal(1, extend=True)
    editor.move_cursor_horizontal(1, extend=True)

    assert editor.selection == Selection(start=pt(0, 0), end=pt(0, 2))

    editor.move_cursor_horizontal(-1)
    assert editor.selection is None
    assert cursor_of(editor) == (0, 0)


def test_vertical_movement_keeps_preferred_column() -> None:
    """It should return to the wider column after passing a short line."""

    editor = OutlineEditor.from_outline(["abcdef", "ab", "abcdef"])
    editor.set_cursor(0, 5)

    editor.move_cursor_vertical(1)
    assert cursor_of(editor) == (1, 2)

    editor.move_cursor_vertical(1)
    assert cursor_of(editor) == (2, 5)


def test_vertical_movement_uses_visible_lines() -> None:
    """It should step over collapsed blocks."""

    editor = OutlineEditor.from_outline([("A", 0), ("a1", 1), ("a2", 1), ("B", 0)])
    editor.toggle_collapse(0)
    editor.set_cursor(0, 0)

    editor.move_cursor_vertical(1)

    assert cursor_of(editor) == (3, 0)


def test_page_movement_uses_configured_step() -> None:
    """It should move by `page_lines` visible lines and clamp at the end."""

    editor = OutlineEditor.from_outline(["1", "2", "3", "4", "5"], settings=Settings(page_lines=2))

    editor.move_cursor_page(1)
    assert editor.cursor.line_index == 2

    editor.move_cursor_page(5)
    assert editor.cursor.line_index == 4


def test_line_and_document_edges() -> None:
    """It should jump to line and document boundaries, optionally extending."""

    editor = OutlineEditor.from_outline(["hello", "world!"])
    editor.set_cursor(0, 2)

    editor.move_cursor_to_line_edge("end", extend=True)
    assert editor.selection == Selection(start=pt(0, 2), end=pt(0, 5))

    editor.move_cursor_to_line_edge("start")
    assert cursor_of(editor) == (0, 0)
    assert editor.selection is None

    editor.move_cursor_to_document_edge("end")
    assert cursor_of(editor) == (1, 6)

    editor.move_cursor_to_document_edge("start")
    assert cursor_of(editor) == (0, 0)


def test_word_boundaries() -> None:
    """It should stop at the edges of word and non-word runs."""

    text = "foo bar_baz  qux"

    assert find_word_boundary(text, 0, 1) == 3
    assert find_word_boundary(text, 3, 1) == 4
    assert find_word_boundary(text, 4, 1) == 11
    assert find_word_boundary(text, 16, -1) == 13
    assert find_word_boundary(text, 13, -1) == 11
    assert find_word_boundary(text, 11, -1) == 4


def test_word_movement_crosses_lines() -> None:
    """It should move to the adjacent visible line when already at an edge."""

    editor = OutlineEditor.from_outline(["one two", "three"])
    editor.set_cursor(0, 7)

    editor.move_cursor_by_word(1)
    assert cursor_of(editor) == (1, 5)

    editor.move_cursor_by_word(-1)
    assert cursor_of(editor) == (1, 0)

    editor.move_cursor_by_word(-1)
    assert cursor_of(editor) == (0, 4)


def test_horizontal_move_with_empty_selection_moves_caret() -> None:
    """It should step the caret when extension has returned to the anchor."""

    editor = OutlineEditor.from_outline(["hello"])
    editor.set_cursor(0, 2)
    editor.move_cursor_horizontal(1, extend=True)
    editor.move_cursor_horizontal(-1, extend=True)
    assert editor.selection is None

    editor.move_cursor_horizontal(1)
    assert cursor_of(editor) == (0, 3)

    editor.set_cursor(0, 2)
    editor.move_cursor_horizontal(1, extend=True)
    editor.move_cursor_horizontal(-1, extend=True)
    editor.move_cursor_horizontal(-1, extend=True)
    assert editor.selection == Selection(start=pt(0, 2), end=pt(0, 1))
