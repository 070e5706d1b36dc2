"""Tests for document events and the JSONL recorder."""

from __future__ import annotations

from pathlib import Path

from outliner.editor.engine import OutlineEditor
from outliner.events import DocumentEvent, EventType
from outliner.models.selection import Point
from outliner.recording import FileEventRecorder, iter_events


def test_listeners_receive_one_event_per_version() -> None:
    """It should publish the new version and stop after unsubscribing."""

    editor = OutlineEditor.from_outline(["a"])
    events: list[DocumentEvent] = []
    unsubscribe = editor.subscribe(events.append)

    editor.insert_text("b")
    editor.change_indent(1)
    unsubscribe()
    editor.insert_text("c")

    assert [(e.version, e.operation, e.event_type) for e in events] == [
        (1, "insert_text", EventType.EDIT),
        (2, "change_indent", EventType.STRUCTURE),
    ]
    assert events[0].session == editor.session


def test_failing_listener_does_not_break_editing() -> None:
    """It should log listener failures and keep notifying the others."""

    editor = OutlineEditor.from_outline(["a"])
    received: list[int] = []

    def broken(event: DocumentEvent) -> None:
        raise RuntimeError("boom")

    editor.subscribe(broken)
    editor.subscribe(lambda event: received.append(event.version))

    editor.insert_text("b")

    assert editor.lines[0].text == "ba"
    assert received == [1]


def test_file_recorder_round_trip(tmp_path: Path) -> None:
    """It should append events as JSONL and load them back in order."""

    path = tmp_path / "events" / "session.jsonl"
    editor = OutlineEditor.from_outline(["a"])
    editor.subscribe(FileEventRecorder(path))

    editor.change_indent(1)
    editor.undo()

    loaded = iter_events(path)
    assert [e.operation for e in loaded] == ["change_indent", "undo"]
    assert loaded[1].event_type == EventType.HISTORY
    assert loaded[0].metadata["delta"] == 1


def test_iter_events_missing_file(tmp_path: Path) -> None:
    """It should return an empty list when nothing was recorded."""

    assert iter_events(tmp_path / "missing.jsonl") == []


def test_typing_over_selection_publishes_one_event() -> None:
    """It should report a replaced selection as a single change."""

    editor = OutlineEditor.from_outline(["hello world"])
    editor.set_selection(Point(line_index=0, char_index=0), Point(line_index=0, char_index=5))
    events: list[DocumentEvent] = []
    editor.subscribe(events.append)

    editor.insert_text("bye")

    assert editor.lines[0].text == "bye world"
    assert [e.operation for e in events] == ["insert_text"]
    assert editor.document_version == 1
    editor.undo()
    assert editor.lines[0].text == "hello world"
