"""Outline editor engine.

`OutlineEditor` owns the line store, the caret/selection, the undo history and a search
session. It is the only code path allowed to mutate lines. Every mutating operation follows the
same order: record history, mutate, bump `document_version`, invalidate derived caches.

Out-of-range input is clamped, never raised. Structural no-ops (outdent at 0, collapsing a
leaf, moving past a boundary) return without touching history or the version counter.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Literal, Mapping

from outliner.config import Settings
from outliner.document.store import LineStore
from outliner.document.tree import TreeIndex
from outliner.editor.cursor import normalize_selection, selection_line_range, shift_point
from outliner.editor.history import HistoryManager
from outliner.events import DocumentEvent, EventType
from outliner.logging import editor_context, get_logger
from outliner.models.line import Attachment, Line
from outliner.models.selection import Point, Selection
from outliner.models.snapshot import EditorSnapshot
from outliner.search.controller import SearchController
from outliner.utils.ids import new_line_id, new_session_id
from outliner.utils.text import clamp, find_word_boundary, normalize_newlines

logger = get_logger(__name__)

Edge = Literal["start", "end"]
DocumentListener = Callable[[DocumentEvent], None]


@dataclass
class ReconcileStats:
    """What `apply_snapshot` did to the local line list."""

    inserted: int = 0
    moved: int = 0
    updated: int = 0
    removed: int = 0


class OutlineEditor:
    """In-memory outline document with structural editing, history and search."""

    def __init__(
        self,
        lines: Iterable[Line] | None = None,
        *,
        settings: Settings | None = None,
        id_factory: Callable[[], str] = new_line_id,
        clock: Callable[[], float] = time.monotonic,
        session: str | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.session = session or new_session_id()
        self.store = LineStore(lines, id_factory=id_factory)
        self.tree = TreeIndex(self.store)
        self.history = HistoryManager(self.settings.history_limit)

        self.cursor = Point()
        self.selection: Selection | None = None
        self.selection_anchor: Point | None = None
        self.scroll_top = 0.0
        self.scroll_left = 0.0
        self.preferred_column = -1
        # Set whenever an operation asks for the caret to be scrolled into view; the
        # renderer consumes and clears it.
        self.reveal_requested = False

        self._listeners: list[DocumentListener] = []
        self.search = SearchController(self, clock=clock)

    @classmethod
    def from_outline(
        cls,
        items: Iterable[tuple[str, int] | str],
        *,
        id_factory: Callable[[], str] = new_line_id,
        **kwargs: Any,
    ) -> "OutlineEditor":
        """Build an editor from `(text, indent)` pairs or bare strings."""

        lines: list[Line] = []
        for item in items:
            text, indent = (item, 0) if isinstance(item, str) else item
            lines.append(Line(id=id_factory(), text=text, indent=max(0, indent)))
        return cls(lines, id_factory=id_factory, **kwargs)

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def lines(self) -> list[Line]:
        return self.store.lines

    @property
    def document_version(self) -> int:
        return self.store.version

    def line_count(self) -> int:
        return len(self.store)

    def line_length(self, index: int) -> int:
        return self.store[index].length()

    def current_line(self) -> Line:
        return self.store[self.cursor.line_index]

    def parent(self, index: int) -> int | None:
        return self.tree.parent(index)

    def has_children(self, index: int) -> bool:
        return self.tree.has_children(index)

    def descendant_end(self, index: int) -> int:
        return self.tree.descendant_end(index)

    def is_visible(self, index: int) -> bool:
        return self.tree.is_visible(index)

    def visible_lines(self) -> list[int]:
        return self.tree.visible_lines()

    def has_selection(self) -> bool:
        return self.selection is not None and not self.selection.is_empty()

    def normalized_selection(self) -> Selection | None:
        return normalize_selection(self.selection)

    def get_selected_text(self) -> str:
        """Return the selected text with lines joined by newlines."""

        selection = self.normalized_selection()
        if selection is None:
            return ""
        start, end = selection.start, selection.end
        lines = self.store.lines
        if start.line_index == end.line_index:
            return lines[start.line_index].text[start.char_index : end.char_index]
        parts = [lines[start.line_index].text[start.char_index :]]
        parts.extend(lines[i].text for i in range(start.line_index + 1, end.line_index))
        parts.append(lines[end.line_index].text[: end.char_index])
        return "\n".join(parts)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: DocumentListener) -> Callable[[], None]:
        """Register a listener for document events; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _mark(
        self,
        operation: str,
        event_type: EventType = EventType.EDIT,
        **metadata: str | int | float | bool | None,
    ) -> None:
        version = self.store.bump()
        self.tree.invalidate()
        with editor_context(session=self.session, op=operation):
            logger.debug("Document changed: version=%d lines=%d", version, len(self.store))
        if not self._listeners:
            return
        event = DocumentEvent(
            session=self.session,
            version=version,
            event_type=event_type,
            operation=operation,
            line_count=len(self.store),
            metadata=dict(metadata),
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Document listener failed",
                    extra={"operation": operation, "version": version},
                )

    # ------------------------------------------------------------------
    # Cursor and selection
    # ------------------------------------------------------------------

    def _clamp_point(self, point: Point) -> Point:
        line_index = clamp(point.line_index, 0, self.store.last_index())
        char_index = clamp(point.char_index, 0, self.line_length(line_index))
        return Point(line_index=line_index, char_index=char_index)

    def set_cursor(
        self,
        line_index: int,
        char_index: int,
        *,
        reset_selection: bool = True,
        scroll_into_view: bool = True,
    ) -> None:
        line_index = clamp(line_index, 0, self.store.last_index())
        char_index = clamp(char_index, 0, self.line_length(line_index))
        self.cursor = Point(line_index=line_index, char_index=char_index)
        if reset_selection:
            self.selection = None
            self.selection_anchor = None
        if scroll_into_view:
            self.reveal_requested = True
        self.preferred_column = -1

    def set_selection(self, start: Point, end: Point) -> None:
        """Select `[start, end]` (clamped); the caret moves to `end`."""

        start = self._clamp_point(start)
        end = self._clamp_point(end)
        self.set_cursor(end.line_index, end.char_index, reset_selection=False)
        self.selection = None if start == end else Selection(start=start, end=end)
        self.selection_anchor = start

    def clear_selection(self) -> None:
        self.selection = None
        self.selection_anchor = None

    def ensure_selection_anchor(self) -> None:
        if self.selection_anchor is not None:
            return
        normalized = self.normalized_selection()
        self.selection_anchor = normalized.start if normalized is not None else self.cursor

    def _move_to(self, line_index: int, char_index: int, extend: bool) -> None:
        if not extend:
            self.set_cursor(line_index, char_index)
            return
        self.ensure_selection_anchor()
        self.set_cursor(line_index, char_index, reset_selection=False)
        # Empty ranges clear the selection but keep the anchor.
        anchor = self.selection_anchor
        self.selection = None if anchor == self.cursor else Selection(start=anchor, end=self.cursor)

    def select_all(self) -> None:
        last = self.store.last_index()
        last_char = self.line_length(last)
        self.selection = Selection(
            start=Point(line_index=0, char_index=0),
            end=Point(line_index=last, char_index=last_char),
        )
        self.set_cursor(last, last_char, reset_selection=False)

    def move_cursor_horizontal(self, direction: int, extend: bool = False) -> None:
        if self.has_selection() and not extend:
            normalized = self.normalized_selection()
            target = normalized.start if direction < 0 else normalized.end
            self.set_cursor(target.line_index, target.char_index)
            return

        line_index = self.cursor.line_index
        char_index = self.cursor.char_index + direction
        if char_index < 0:
            prev = self.tree.previous_visible(line_index)
            if prev is None:
                char_index = 0
            else:
                line_index, char_index = prev, self.line_length(prev)
        elif char_index > self.line_length(line_index):
            nxt = self.tree.next_visible(line_index)
            if nxt is None:
                char_index = self.line_length(line_index)
            else:
                line_index, char_index = nxt, 0
        self._move_to(line_index, char_index, extend)

    def move_cursor_vertical(self, visible_delta: int, extend: bool = False) -> None:
        visible = self.tree.visible_lines()
        current = self.tree.visible_index(self.cursor.line_index)
        if current == -1:
            return
        preferred = self.preferred_column
        if preferred < 0:
            preferred = self.cursor.char_index
        target = visible[clamp(current + visible_delta, 0, len(visible) - 1)]
        self._move_to(target, min(preferred, self.line_length(target)), extend)
        self.preferred_column = preferred

    def move_cursor_page(self, direction: int, extend: bool = False) -> None:
        self.move_cursor_vertical(direction * self.settings.page_lines, extend)

    def move_cursor_to_line_edge(self, edge: Edge, extend: bool = False) -> None:
        line_index = self.cursor.line_index
        target = 0 if edge == "start" else self.line_length(line_index)
        self._move_to(line_index, target, extend)

    def move_cursor_to_document_edge(self, edge: Edge, extend: bool = False) -> None:
        if edge == "start":
            self._move_to(0, 0, extend)
            return
        last = self.store.last_index()
        self._move_to(last, self.line_length(last), extend)

    def move_cursor_by_word(self, direction: int, extend: bool = False) -> None:
        line_index = self.cursor.line_index
        char_index = self.cursor.char_index
        line = self.store[line_index]

        if line.is_atomic():
            if direction < 0:
                if char_index > 0:
                    char_index = 0
                else:
                    prev = self.tree.previous_visible(line_index)
                    if prev is None:
                        return
                    line_index, char_index = prev, self.line_length(prev)
            else:
                if char_index < line.length():
                    char_index = line.length()
                else:
                    nxt = self.tree.next_visible(line_index)
                    if nxt is None:
                        return
                    line_index, char_index = nxt, 0
            self._move_to(line_index, char_index, extend)
            return

        if direction < 0:
            if char_index == 0:
                prev = self.tree.previous_visible(line_index)
                if prev is None:
                    return
                line_index, char_index = prev, self.line_length(prev)
            char_index = find_word_boundary(self.store[line_index].text, char_index, -1)
        else:
            if char_index == line.length():
                nxt = self.tree.next_visible(line_index)
                if nxt is None:
                    return
                line_index, char_index = nxt, 0
            char_index = find_word_boundary(self.store[line_index].text, char_index, 1)
        self._move_to(line_index, char_index, extend)

    # ------------------------------------------------------------------
    # Text editing
    # ------------------------------------------------------------------

    def save_history(self) -> None:
        """Record the current state as an undo entry."""

        self.history.push(self.to_snapshot())

    def insert_text(self, text: str) -> None:
        """Insert `text` at the caret, replacing any selection.

        Newlines split the current line; new lines inherit its indent and the last one
        carries the original tail.
        """

        if not text:
            return
        text = normalize_newlines(text)
        self.save_history()
        if self.has_selection():
            self._collapse_selection(mark=False)

        cursor = self.cursor
        line = self.store[cursor.line_index]
        parts = text.split("\n")

        if line.is_atomic():
            insert_at = cursor.line_index if cursor.char_index == 0 else cursor.line_index + 1
            new_lines = [self.store.create_line(part, line.indent) for part in parts]
            self.store.insert(insert_at, *new_lines)
            self._mark("insert_text")
            self.set_cursor(insert_at + len(new_lines) - 1, len(parts[-1]))
            return

        head = line.text[: cursor.char_index]
        tail = line.text[cursor.char_index :]
        if len(parts) == 1:
            line.text = head + text + tail
            self._mark("insert_text")
            self.set_cursor(cursor.line_index, cursor.char_index + len(text))
            return

        line.text = head + parts[0]
        new_lines = [self.store.create_line(part, line.indent) for part in parts[1:]]
        new_lines[-1].text += tail
        self.store.insert(cursor.line_index + 1, *new_lines)
        self._mark("insert_text")
        self.set_cursor(cursor.line_index + len(new_lines), len(parts[-1]))

    def insert_line_break(self, indent: int | None = None) -> None:
        """Split the current line at the caret.

        The new line keeps the current indent unless `indent` is given.
        """

        self.save_history()
        if self.has_selection():
            self._collapse_selection(mark=False)

        cursor = self.cursor
        line = self.store[cursor.line_index]
        new_indent = line.indent if indent is None else max(0, indent)

        if line.is_atomic():
            insert_at = cursor.line_index if cursor.char_index == 0 else cursor.line_index + 1
            self.store.insert(insert_at, self.store.create_line("", new_indent))
            self._mark("insert_line_break")
            self.set_cursor(insert_at, 0)
            return

        tail = line.text[cursor.char_index :]
        line.text = line.text[: cursor.char_index]
        self.store.insert(cursor.line_index + 1, self.store.create_line(tail, new_indent))
        self._mark("insert_line_break")
        self.set_cursor(cursor.line_index + 1, 0)

    def insert_bracket_pair(self) -> None:
        """Wrap the selection in `[...]`, or insert `[]` with the caret inside."""

        if self.current_line().is_atomic() and not self.has_selection():
            return
        self.save_history()
        wrapping = self.has_selection()
        extracted = ""
        if wrapping:
            extracted = self.get_selected_text()
            self._collapse_selection(mark=False)

        cursor = self.cursor
        line = self.store[cursor.line_index]
        if line.is_atomic():
            self._mark("insert_bracket_pair")
            return
        head = line.text[: cursor.char_index]
        tail = line.text[cursor.char_index :]
        line.text = f"{head}[{extracted}]{tail}"
        self._mark("insert_bracket_pair")
        offset = len(extracted) + 2 if wrapping else 1
        self.set_cursor(cursor.line_index, cursor.char_index + offset)

    def insert_attachment(self, attachment: Attachment) -> None:
        """Insert an atomic attachment line at the caret."""

        self.save_history()
        if self.has_selection():
            self._collapse_selection(mark=False)

        cursor = self.cursor
        current = self.store[cursor.line_index]

        if current.is_atomic():
            insert_at = cursor.line_index if cursor.char_index == 0 else cursor.line_index + 1
            image_line = self.store.create_attachment_line(attachment, current.indent)
            self.store.insert(insert_at, image_line)
            self._mark("insert_attachment", EventType.STRUCTURE)
            self.set_cursor(insert_at, image_line.length())
            return

        image_line = self.store.create_attachment_line(attachment, current.indent)
        if not current.text:
            self.store.replace(cursor.line_index, image_line)
            self._mark("insert_attachment", EventType.STRUCTURE)
            self.set_cursor(cursor.line_index, image_line.length())
            return

        head = current.text[: cursor.char_index]
        tail = current.text[cursor.char_index :]
        current.text = head
        insert_at = cursor.line_index + 1
        self.store.insert(insert_at, image_line)
        if tail:
            self.store.insert(insert_at + 1, self.store.create_line(tail, current.indent))
            self._mark("insert_attachment", EventType.STRUCTURE)
            self.set_cursor(insert_at + 1, 0)
            return
        self._mark("insert_attachment", EventType.STRUCTURE)
        self.set_cursor(insert_at, image_line.length())

    def replace_line_texts(self, texts: Mapping[int, str], *, operation: str = "replace_text") -> int:
        """Overwrite the text of several lines as one undoable step.

        Indices outside the document and attachment lines are skipped.

        Returns:
            Number of lines rewritten.
        """

        targets = {
            index: text
            for index, text in texts.items()
            if 0 <= index < len(self.store) and not self.store[index].is_atomic()
        }
        if not targets:
            return 0
        self.save_history()
        for index, text in targets.items():
            self.store[index].text = text
        self._mark(operation, EventType.SEARCH, count=len(targets))
        self.cursor = self._clamp_point(self.cursor)
        if self.selection is not None:
            self.selection = Selection(
                start=self._clamp_point(self.selection.start),
                end=self._clamp_point(self.selection.end),
            )
        return len(targets)

    def delete_selection(self) -> bool:
        """Delete the selection as one undoable step. Returns False when nothing is selected."""

        if not self.has_selection():
            return False
        self.save_history()
        self._collapse_selection()
        return True

    def _collapse_selection(self, *, mark: bool = True) -> Point | None:
        """Remove the selected range without recording history.

        Callers that replace the selection pass `mark=False` and publish a single change.

        An attachment line is removed only when the range covers it completely.
        """

        selection = self.normalized_selection()
        if selection is None:
            return None
        start, end = selection.start, selection.end
        store = self.store
        start_line = store[start.line_index]
        end_line = store[end.line_index]

        if start.line_index == end.line_index:
            if start_line.is_atomic():
                if start.char_index == 0 and end.char_index >= 1:
                    store.replace(start.line_index, store.create_line("", start_line.indent))
            else:
                start_line.text = start_line.text[: start.char_index] + start_line.text[end.char_index :]
        else:
            pieces: list[Line] = []
            head: Line | None
            if start_line.is_atomic():
                if start.char_index > 0:
                    pieces.append(start_line)
                    head = None
                else:
                    head = store.create_line("", start_line.indent)
            else:
                start_line.text = start_line.text[: start.char_index]
                head = start_line

            keep_end = end_line.is_atomic() and end.char_index == 0
            tail_text = "" if end_line.is_atomic() else end_line.text[end.char_index :]
            if head is not None:
                head.text += tail_text
                pieces.append(head)
            elif tail_text:
                pieces.append(store.create_line(tail_text, end_line.indent))
            if keep_end:
                pieces.append(end_line)
            store.splice(start.line_index, end.line_index - start.line_index + 1, *pieces)

        if mark:
            self._mark("delete_selection")
        else:
            self.tree.invalidate()
        self.set_cursor(start.line_index, start.char_index)
        return start

    def handle_backspace(self) -> None:
        if self.delete_selection():
            return
        cursor = self.cursor
        line = self.store[cursor.line_index]

        if line.is_atomic():
            if cursor.char_index == 0 and line.indent > 0:
                self.change_indent(-1)
                return
            if cursor.line_index == 0:
                return
            self.save_history()
            self.store.remove(cursor.line_index)
            self._mark("handle_backspace", EventType.STRUCTURE)
            target = max(0, cursor.line_index - 1)
            self.set_cursor(target, self.line_length(target))
            return

        if cursor.char_index > 0:
            self.save_history()
            line.text = line.text[: cursor.char_index - 1] + line.text[cursor.char_index :]
            self._mark("handle_backspace")
            self.set_cursor(cursor.line_index, cursor.char_index - 1)
            return

        if cursor.line_index > 0 and self.store[cursor.line_index - 1].is_atomic():
            self.save_history()
            self.store.remove(cursor.line_index - 1)
            self._mark("handle_backspace", EventType.STRUCTURE)
            self.set_cursor(cursor.line_index - 1, 0)
            return

        if line.indent > 0:
            self.change_indent(-1)
            return
        if cursor.line_index == 0:
            return

        self.save_history()
        prev_index = cursor.line_index - 1
        prev = self.store[prev_index]
        prev_length = prev.length()
        prev.text += line.text
        # Descendants of the removed line stay in place with their own indent.
        self.store.remove(cursor.line_index)
        self._mark("handle_backspace", EventType.STRUCTURE)
        self.set_cursor(prev_index, prev_length)

    def handle_delete(self) -> None:
        if self.delete_selection():
            return
        cursor = self.cursor
        line = self.store[cursor.line_index]

        if line.is_atomic():
            self.save_history()
            self.store.remove(cursor.line_index)
            self._mark("handle_delete", EventType.STRUCTURE)
            target = min(cursor.line_index, self.store.last_index())
            self.set_cursor(target, min(cursor.char_index, self.line_length(target)))
            return

        if cursor.char_index < len(line.text):
            self.save_history()
            line.text = line.text[: cursor.char_index] + line.text[cursor.char_index + 1 :]
            self._mark("handle_delete")
            self.set_cursor(cursor.line_index, cursor.char_index)
            return

        if cursor.line_index >= self.store.last_index():
            return
        self.save_history()
        next_index = cursor.line_index + 1
        nxt = self.store[next_index]
        if nxt.is_atomic():
            self.store.remove(next_index)
            self._mark("handle_delete", EventType.STRUCTURE)
            return
        line.text += nxt.text
        # Only the merged line goes; its descendants keep their indent.
        self.store.remove(next_index)
        self._mark("handle_delete", EventType.STRUCTURE)
        self.set_cursor(cursor.line_index, cursor.char_index)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def change_indent(
        self,
        delta: int,
        *,
        apply_to_selection: bool = False,
        include_children: bool = False,
    ) -> None:
        """Shift indent by `delta`, floored at zero.

        Applies to the caret line, or every line of the selection when `apply_to_selection`
        is set and a selection exists. With `include_children`, whole descendant blocks move.
        """

        line_range = selection_line_range(self.selection) if apply_to_selection else None
        if line_range is None:
            line_range = (self.cursor.line_index, self.cursor.line_index)
        first, last = line_range
        lines = self.store.lines

        targets: list[int] = []
        if include_children:
            index = first
            while index <= last and index < len(lines):
                block_end = self.tree.descendant_end(index)
                targets.extend(range(index, block_end))
                index = block_end
        else:
            targets = list(range(first, min(last, len(lines) - 1) + 1))

        if not any(max(0, lines[i].indent + delta) != lines[i].indent for i in targets):
            return

        self.save_history()
        for i in targets:
            lines[i].indent = max(0, lines[i].indent + delta)
        self._mark("change_indent", EventType.STRUCTURE, delta=delta, count=len(targets))

    def toggle_collapse(self, line_index: int) -> None:
        if not 0 <= line_index < len(self.store):
            return
        if not self.tree.has_children(line_index):
            return
        self.save_history()
        line = self.store[line_index]
        line.collapsed = not line.collapsed
        self._mark("toggle_collapse", EventType.STRUCTURE, collapsed=line.collapsed)
        if line.collapsed and not self.tree.is_visible(self.cursor.line_index):
            self.set_cursor(line_index, min(self.cursor.char_index, line.length()))

    def move_line(self, delta: int) -> None:
        """Move the caret line (or selected lines) by `delta` slots, ignoring hierarchy."""

        if delta == 0:
            return
        line_range = selection_line_range(self.selection)
        start, end = line_range if line_range else (self.cursor.line_index, self.cursor.line_index)
        if delta < 0 and start + delta < 0:
            return
        if delta > 0 and end + delta >= len(self.store):
            return

        cursor = self.cursor
        selection = self.selection
        anchor = self.selection_anchor
        self.save_history()
        self.store.move_range(start, end - start + 1, start + delta)

        new_cursor = shift_point(cursor, start, end, delta)
        self.set_cursor(new_cursor.line_index, new_cursor.char_index, reset_selection=selection is None)
        if selection is not None:
            self.selection = Selection(
                start=shift_point(selection.start, start, end, delta),
                end=shift_point(selection.end, start, end, delta),
            )
        if anchor is not None:
            self.selection_anchor = shift_point(anchor, start, end, delta)
        self._mark("move_line", EventType.STRUCTURE, delta=delta)

    def move_block(self, direction: int) -> None:
        """Swap the caret line's block with the adjacent sibling block at the same depth."""

        start = self.cursor.line_index
        end = self.tree.descendant_end(start)
        length = end - start
        base_indent = self.store[start].indent
        lines = self.store.lines

        if direction < 0:
            prev = start - 1
            while prev >= 0 and lines[prev].indent > base_indent:
                prev -= 1
            if prev < 0 or lines[prev].indent != base_indent:
                return
            insert_at = prev
        elif direction > 0:
            if end >= len(lines) or lines[end].indent != base_indent:
                return
            insert_at = self.tree.descendant_end(end) - length
        else:
            return

        char_index = self.cursor.char_index
        self.save_history()
        self.store.move_range(start, length, insert_at)
        self._mark("move_block", EventType.STRUCTURE, direction=direction)
        self.set_cursor(insert_at, char_index)

    # ------------------------------------------------------------------
    # History and snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self) -> EditorSnapshot:
        return EditorSnapshot(
            lines=self.store.clone_lines(),
            cursor=self.cursor,
            selection=self.selection,
            scroll_top=self.scroll_top,
            scroll_left=self.scroll_left,
        )

    def _restore(self, snapshot: EditorSnapshot, operation: str) -> None:
        self.store.reset(line.clone() for line in snapshot.lines)
        self.cursor = self._clamp_point(snapshot.cursor or Point())
        self.selection = (
            Selection(
                start=self._clamp_point(snapshot.selection.start),
                end=self._clamp_point(snapshot.selection.end),
            )
            if snapshot.selection is not None
            else None
        )
        self.selection_anchor = None
        self.scroll_top = snapshot.scroll_top
        self.scroll_left = snapshot.scroll_left
        self.preferred_column = -1
        self._mark(operation, EventType.HISTORY)

    def undo(self) -> bool:
        snapshot = self.history.undo(self.to_snapshot())
        if snapshot is None:
            return False
        self._restore(snapshot, "undo")
        return True

    def redo(self) -> bool:
        snapshot = self.history.redo(self.to_snapshot())
        if snapshot is None:
            return False
        self._restore(snapshot, "redo")
        return True

    def apply_snapshot(
        self,
        snapshot: EditorSnapshot | dict,
        *,
        record_history: bool = False,
    ) -> ReconcileStats:
        """Reconcile the local state with `snapshot` by line id.

        Lines with known ids are updated in place and keep their object identity; unknown ids
        are inserted, and local lines missing from the snapshot are dropped. Cursor and
        selection are taken from the snapshot only when it carries a cursor.
        """

        if not isinstance(snapshot, EditorSnapshot):
            snapshot = EditorSnapshot.model_validate(snapshot)
        if record_history:
            self.save_history()

        existing = {line.id: (i, line) for i, line in enumerate(self.store.lines)}
        stats = ReconcileStats()
        seen: set[str] = set()
        merged: list[Line] = []

        for position, incoming in enumerate(snapshot.lines):
            line_id = incoming.id
            if not line_id or line_id in seen:
                line_id = self.store.new_id()
            found = existing.get(line_id)
            if found is None:
                line = incoming.clone()
                line.id = line_id
                stats.inserted += 1
            else:
                old_index, line = found
                if old_index != position:
                    stats.moved += 1
                if _update_line(line, incoming):
                    stats.updated += 1
            seen.add(line_id)
            merged.append(line)

        stats.removed = sum(1 for line_id in existing if line_id not in seen)
        self.store.reset(merged)

        if snapshot.cursor is not None:
            self.cursor = self._clamp_point(snapshot.cursor)
            self.selection = (
                Selection(
                    start=self._clamp_point(snapshot.selection.start),
                    end=self._clamp_point(snapshot.selection.end),
                )
                if snapshot.selection is not None
                else None
            )
            self.selection_anchor = None
        else:
            self.cursor = self._clamp_point(self.cursor)
            if self.selection is not None:
                self.selection = Selection(
                    start=self._clamp_point(self.selection.start),
                    end=self._clamp_point(self.selection.end),
                )
            if self.selection_anchor is not None:
                self.selection_anchor = self._clamp_point(self.selection_anchor)
        self.scroll_top = snapshot.scroll_top
        self.scroll_left = snapshot.scroll_left

        self._mark(
            "apply_snapshot",
            EventType.SYNC,
            inserted=stats.inserted,
            moved=stats.moved,
            updated=stats.updated,
            removed=stats.removed,
        )
        logger.info(
            "Snapshot reconciled: inserted=%d moved=%d updated=%d removed=%d",
            stats.inserted,
            stats.moved,
            stats.updated,
            stats.removed,
        )
        return stats


def _update_line(target: Line, incoming: Line) -> bool:
    changed = False
    for field in ("text", "indent", "collapsed", "type"):
        value = getattr(incoming, field)
        if getattr(target, field) != value:
            setattr(target, field, value)
            changed = True
    if target.attachment != incoming.attachment:
        target.attachment = (
            incoming.attachment.model_copy(deep=True) if incoming.attachment is not None else None
        )
        changed = True
    return changed
