"""Tests for undo/redo history."""

from __future__ import annotations

from outliner.config import Settings
from outliner.editor.engine import OutlineEditor
from outliner.editor.history import HistoryManager
from outliner.models.snapshot import EditorSnapshot
from outliner.models.selection import Point, Selection


def state_of(editor: OutlineEditor) -> dict:
    dumped = editor.to_snapshot().model_dump()
    return {key: dumped[key] for key in ("lines", "cursor", "selection")}


def test_undo_redo_round_trip() -> None:
    """It should restore the exact prior states in both directions."""

    editor = OutlineEditor.from_outline([("alpha", 0), ("beta", 1)])
    editor.set_selection(Point(line_index=0, char_index=1), Point(line_index=0, char_index=3))
    before = state_of(editor)

    editor.insert_text("x")
    editor.insert_line_break()
    editor.change_indent(1)
    editor.move_line(1)
    after = state_of(editor)

    for _ in range(4):
        assert editor.undo()
    assert state_of(editor) == before

    for _ in range(4):
        assert editor.redo()
    assert state_of(editor) == after


def test_undo_does_not_record_history() -> None:
    """It should move entries between stacks without creating new ones."""

    editor = OutlineEditor.from_outline(["a"])
    editor.insert_text("b")
    editor.insert_text("c")

    editor.undo()

    assert editor.history.undo_depth() == 1
    assert editor.history.redo_depth() == 1


def test_new_action_clears_redo() -> None:
    """It should drop redo entries once a new edit is recorded."""

    editor = OutlineEditor.from_outline(["a"])
    editor.insert_text("b")
    editor.undo()
    assert editor.history.can_redo

    editor.insert_text("c")

    assert not editor.history.can_redo
    assert not editor.redo()


def test_history_evicts_oldest_entry() -> None:
    """It should keep only the newest `history_limit` entries."""

    editor = OutlineEditor.from_outline([""], settings=Settings(history_limit=3))
    for ch in "abcde":
        editor.insert_text(ch)

    assert editor.history.undo_depth() == 3
    for _ in range(3):
        assert editor.undo()
    assert editor.lines[0].text == "ab"
    assert not editor.undo()


def test_undo_always_bumps_version() -> None:
    """It should bump the version on undo/redo but not on an empty stack."""

    editor = OutlineEditor.from_outline(["a"])
    assert not editor.undo()
    assert editor.document_version == 0

    editor.insert_text("b")
    editor.undo()
    assert editor.document_version == 2
    editor.redo()
    assert editor.document_version == 3


def test_history_manager_stacks() -> None:
    """It should swap the current snapshot onto the opposite stack."""

    history = HistoryManager(limit=2)
    first = EditorSnapshot(selection=Selection(start=Point(), end=Point()))
    second = EditorSnapshot(scroll_top=10)
    current = EditorSnapshot(scroll_top=20)

    history.push(first)
    history.push(second)
    history.push(current)

    assert history.undo_depth() == 2
    assert history.undo(EditorSnapshot()) is current
    assert history.redo(EditorSnapshot(scroll_top=99)) is not None
    assert history.redo_depth() == 0
