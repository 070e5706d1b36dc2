"""Tests for snapshot export and id-based reconciliation."""

from __future__ import annotations

from outliner.editor.engine import OutlineEditor
from outliner.utils.ids import sequential_id_factory


def _editor() -> OutlineEditor:
    return OutlineEditor.from_outline(["A", "B", "C"], id_factory=sequential_id_factory())


def test_snapshot_serializes_camel_case() -> None:
    """It should emit the interchange keys used by peers."""

    editor = _editor()
    editor.set_cursor(1, 1)
    payload = editor.to_snapshot().to_json_dict()

    assert set(payload) == {"lines", "cursor", "selection", "scrollTop", "scrollLeft"}
    assert payload["cursor"] == {"lineIndex": 1, "charIndex": 1}
    assert payload["lines"][0]["id"] == "line-0001"
    assert payload["selection"] is None


def test_apply_snapshot_reconciles_by_id() -> None:
    """It should insert, move, update and delete lines while keeping object identity."""

    editor = _editor()
    line_b = editor.lines[1]

    stats = editor.apply_snapshot(
        {
            "lines": [
                {"id": "line-0003", "text": "C", "indent": 0},
                {"id": "line-0002", "text": "B2", "indent": 1},
                {"id": "remote-1", "text": "N"},
            ],
            "cursor": None,
        }
    )

    assert [line.text for line in editor.lines] == ["C", "B2", "N"]
    assert [line.id for line in editor.lines] == ["line-0003", "line-0002", "remote-1"]
    assert editor.lines[1] is line_b
    assert (stats.inserted, stats.moved, stats.updated, stats.removed) == (1, 1, 1, 1)
    assert editor.document_version == 1
    assert editor.history.undo_depth() == 0


def test_apply_snapshot_generates_missing_and_duplicate_ids() -> None:
    """It should give every line a unique id."""

    editor = _editor()
    editor.apply_snapshot({"lines": [{"text": "x"}, {"id": "d", "text": "y"}, {"id": "d", "text": "z"}]})

    ids = [line.id for line in editor.lines]
    assert all(ids)
    assert len(set(ids)) == 3
    assert ids[1] == "d"


def test_apply_snapshot_keeps_document_non_empty() -> None:
    """It should fall back to a single empty line."""

    editor = _editor()
    editor.apply_snapshot({"lines": []})

    assert editor.line_count() == 1
    assert editor.lines[0].text == ""


def test_apply_snapshot_clamps_cursor() -> None:
    """It should clamp incoming caret positions to the new document."""

    editor = _editor()
    editor.apply_snapshot(
        {
            "lines": [{"id": "line-0001", "text": "Alpha"}],
            "cursor": {"lineIndex": 9, "charIndex": 9},
            "scrollTop": 12.5,
        }
    )

    assert (editor.cursor.line_index, editor.cursor.char_index) == (0, 5)
    assert editor.scroll_top == 12.5


def test_apply_snapshot_can_record_history() -> None:
    """It should make the sync undoable on request."""

    editor = _editor()
    editor.apply_snapshot({"lines": [{"id": "line-0001", "text": "changed"}]}, record_history=True)

    assert editor.history.undo_depth() == 1
    editor.undo()
    assert [line.text for line in editor.lines] == ["A", "B", "C"]


def test_snapshot_round_trip_between_editors() -> None:
    """It should reproduce one editor's state in another."""

    source = OutlineEditor.from_outline([("root", 0), ("child", 1)])
    source.toggle_collapse(0)
    target = OutlineEditor()

    target.apply_snapshot(source.to_snapshot().to_json_dict())

    assert [(line.id, line.text, line.indent, line.collapsed) for line in target.lines] == [
        (line.id, line.text, line.indent, line.collapsed) for line in source.lines
    ]
    assert target.visible_lines() == [0]
