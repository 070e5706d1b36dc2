"""Tests for the tree/visibility index."""

from __future__ import annotations

from outliner.editor.engine import OutlineEditor


def _outline() -> OutlineEditor:
    return OutlineEditor.from_outline([("A", 0), ("B", 1), ("C", 2), ("D", 1), ("E", 0)])


def test_parent_and_children_are_derived_from_indent() -> None:
    """It should find parents by scanning back for a smaller indent."""

    editor = _outline()

    assert editor.parent(0) is None
    assert editor.parent(2) == 1
    assert editor.parent(3) == 0
    assert editor.has_children(0)
    assert not editor.has_children(2)
    assert not editor.has_children(4)


def test_descendant_end_bounds_each_block() -> None:
    """It should end a block at the first line not deeper than its head."""

    editor = _outline()

    assert editor.descendant_end(0) == 4
    assert editor.descendant_end(1) == 3
    assert editor.descendant_end(4) == 5
    for i in range(editor.line_count()):
        if editor.has_children(i):
            assert editor.descendant_end(i) > i + 1
        else:
            assert editor.descendant_end(i) == i + 1


def test_collapsed_ancestor_hides_descendants() -> None:
    """It should hide a line iff some ancestor is collapsed."""

    editor = _outline()
    editor.toggle_collapse(1)

    assert editor.visible_lines() == [0, 1, 3, 4]
    assert not editor.is_visible(2)

    editor.toggle_collapse(0)
    assert editor.visible_lines() == [0, 4]
    for i in range(editor.line_count()):
        hidden = any(editor.lines[a].collapsed for a in editor.tree.ancestors(i))
        assert editor.is_visible(i) is (not hidden)


def test_collapse_on_leaf_is_a_noop() -> None:
    """It should ignore collapse requests for lines without children."""

    editor = _outline()
    editor.toggle_collapse(2)

    assert editor.document_version == 0
    assert editor.history.undo_depth() == 0
    assert not editor.lines[2].collapsed


def test_collapse_relocates_hidden_cursor() -> None:
    """It should move the caret onto the collapsing line when it becomes hidden."""

    editor = _outline()
    editor.set_cursor(2, 1)
    editor.toggle_collapse(1)

    assert (editor.cursor.line_index, editor.cursor.char_index) == (1, 1)
    assert editor.document_version == 1


def test_visible_cache_follows_version() -> None:
    """It should recompute visible lines after a structural edit."""

    editor = _outline()
    assert editor.visible_lines() == [0, 1, 2, 3, 4]

    editor.set_cursor(4, 0)
    editor.change_indent(3)
    editor.toggle_collapse(3)

    assert editor.visible_lines() == [0, 1, 2, 3]
