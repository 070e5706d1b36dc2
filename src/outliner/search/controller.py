"""Search and replace session bound to one editor.

The session moves through `closed -> open -> evaluated -> closed`. Results are a cache keyed
by the editor's `document_version`; any edit made while the session is open marks them stale,
and navigation/replacement re-evaluate before trusting them.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from outliner.logging import editor_context, get_logger
from outliner.models.search import Match, SearchError
from outliner.models.selection import Point, Selection
from outliner.search.matcher import compute_matches
from outliner.search.replace import apply_replacement_pattern

if TYPE_CHECKING:
    from outliner.editor.engine import OutlineEditor

logger = get_logger(__name__)


@dataclass(frozen=True)
class MatchSpan:
    """Position of a match within its line, plus its index in the flat match list."""

    start: int
    end: int
    index: int


@dataclass
class SearchState:
    """Mutable state of a search session."""

    is_open: bool = False
    show_replace: bool = False
    query: str = ""
    replacement: str = ""
    use_regex: bool = False
    case_sensitive: bool = False
    in_selection: bool = False
    selection_scope: Selection | None = None

    matches: list[Match] = field(default_factory=list)
    matches_by_line: dict[int, list[MatchSpan]] = field(default_factory=dict)
    active_index: int = -1
    regex_error: SearchError | None = None
    last_evaluated_version: int = -1
    needs_update: bool = False


def group_matches_by_line(matches: list[Match]) -> dict[int, list[MatchSpan]]:
    grouped: dict[int, list[MatchSpan]] = {}
    for index, match in enumerate(matches):
        grouped.setdefault(match.line_index, []).append(MatchSpan(match.start, match.end, index))
    return grouped


class SearchController:
    """Find/replace over an `OutlineEditor`.

    Edits go through `OutlineEditor.replace_line_texts`, so every replacement is undoable and
    bumps the document version like any other operation.
    """

    def __init__(self, editor: "OutlineEditor", *, clock: Callable[[], float] = time.monotonic) -> None:
        self.editor = editor
        self.clock = clock
        self.state = SearchState()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    def open(self, *, prefill_selection: bool = True) -> None:
        """Open the session, optionally seeding the query with the selected text."""

        state = self.state
        if prefill_selection:
            selected = self.editor.get_selected_text()
            if selected:
                state.query = selected
        state.selection_scope = self.capture_selection_scope() if state.in_selection else None
        state.is_open = True
        state.needs_update = True
        self.update_results()

    def close(self) -> None:
        state = self.state
        if not state.is_open:
            return
        state.is_open = False
        state.selection_scope = None
        self.clear_matches()

    def toggle_replace(self) -> bool:
        self.state.show_replace = not self.state.show_replace
        return self.state.show_replace

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_query(self, query: str) -> None:
        self.state.query = query
        if self.state.is_open:
            self.update_results()

    def set_replacement(self, replacement: str) -> None:
        self.state.replacement = replacement

    def set_options(
        self,
        *,
        use_regex: bool | None = None,
        case_sensitive: bool | None = None,
        in_selection: bool | None = None,
    ) -> None:
        """Change search options; re-evaluates when the session is open."""

        state = self.state
        if use_regex is not None:
            state.use_regex = use_regex
        if case_sensitive is not None:
            state.case_sensitive = case_sensitive
        if in_selection is not None:
            state.in_selection = in_selection
            if in_selection:
                scope = self.capture_selection_scope()
                if scope is not None:
                    state.selection_scope = scope
            else:
                state.selection_scope = None
        if state.is_open:
            self.update_results()

    def capture_selection_scope(self) -> Selection | None:
        """Current non-empty selection, or the previously captured scope."""

        selection = self.editor.normalized_selection()
        if selection is None or selection.is_empty():
            return self.state.selection_scope
        return Selection(start=selection.start, end=selection.end)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def is_stale(self) -> bool:
        state = self.state
        if not state.is_open:
            return False
        return state.needs_update or self.editor.document_version != state.last_evaluated_version

    def clear_matches(self) -> None:
        state = self.state
        state.matches = []
        state.matches_by_line = {}
        state.active_index = -1
        state.regex_error = None
        state.needs_update = False
        state.last_evaluated_version = self.editor.document_version

    def update_results(self, *, preserve_active: bool = False, preferred_index: int | None = None) -> None:
        """Recompute matches for the current query and options.

        Args:
            preserve_active: Keep the previously active match active if it still exists.
            preferred_index: Activate this match index when it is in range.
        """

        state = self.state
        if not state.is_open:
            return

        # The scope is captured on open and on toggle only; the active match becomes the
        # editor selection and must not narrow it.
        if not state.in_selection:
            state.selection_scope = None

        if not state.query:
            self.clear_matches()
            return

        previous = (
            state.matches[state.active_index]
            if preserve_active and 0 <= state.active_index < len(state.matches)
            else None
        )

        with editor_context(session=self.editor.session, op="search"):
            outcome = compute_matches(
                self.editor.lines,
                state.query,
                use_regex=state.use_regex,
                case_sensitive=state.case_sensitive,
                scope=state.selection_scope,
                timeout_ms=self.editor.settings.search_regex_timeout_ms,
                clock=self.clock,
            )
            logger.debug(
                "Search evaluated: query=%r matches=%d error=%s",
                state.query,
                len(outcome.matches),
                outcome.error.kind if outcome.error else None,
            )

        state.last_evaluated_version = self.editor.document_version
        state.needs_update = False
        state.regex_error = outcome.error
        if outcome.error is not None:
            state.matches = []
            state.matches_by_line = {}
            state.active_index = -1
            return

        state.matches = outcome.matches
        state.matches_by_line = group_matches_by_line(state.matches)

        next_active = -1
        if state.matches:
            if preferred_index is not None and 0 <= preferred_index < len(state.matches):
                next_active = preferred_index
            elif previous is not None:
                next_active = next(
                    (
                        i
                        for i, m in enumerate(state.matches)
                        if (m.line_index, m.start, m.end) == (previous.line_index, previous.start, previous.end)
                    ),
                    -1,
                )
            if next_active == -1:
                next_active = 0
        self.set_active_match(next_active)

    def refresh_if_stale(self) -> None:
        if self.is_stale():
            self.update_results(preserve_active=True)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def can_navigate(self) -> bool:
        return bool(self.state.matches) and self.state.regex_error is None

    def active_match(self) -> Match | None:
        state = self.state
        if 0 <= state.active_index < len(state.matches):
            return state.matches[state.active_index]
        return None

    def set_active_match(self, index: int, *, scroll: bool = True) -> None:
        """Activate match `index` and select it in the editor; out-of-range clears it."""

        state = self.state
        if index < 0 or index >= len(state.matches):
            state.active_index = -1
            return
        state.active_index = index
        match = state.matches[index]
        editor = self.editor
        editor.set_cursor(match.line_index, match.end, reset_selection=True, scroll_into_view=scroll)
        start = Point(line_index=match.line_index, char_index=match.start)
        editor.selection = Selection(start=start, end=Point(line_index=match.line_index, char_index=match.end))
        editor.selection_anchor = start

    def step(self, direction: int) -> None:
        """Move to the next (`direction > 0`) or previous match, wrapping around."""

        self.refresh_if_stale()
        state = self.state
        if not self.can_navigate:
            return
        count = len(state.matches)
        if state.active_index == -1:
            index = 0 if direction > 0 else count - 1
        else:
            index = (state.active_index + direction + count) % count
        self.set_active_match(index)

    def result_label(self) -> str:
        state = self.state
        if state.regex_error is not None:
            return "Error"
        total = len(state.matches)
        current = state.active_index + 1 if total and state.active_index >= 0 else 0
        return f"{current}/{total}"

    # ------------------------------------------------------------------
    # Replacement
    # ------------------------------------------------------------------

    def replace_current(self) -> bool:
        """Replace the active match and advance to the match now at the same position."""

        state = self.state
        if not state.is_open:
            return False
        self.refresh_if_stale()
        match = self.active_match()
        if match is None or state.regex_error is not None:
            return False

        original = self.editor.lines[match.line_index].text
        replacement = apply_replacement_pattern(match, state.replacement, original, state.use_regex)
        new_text = original[: match.start] + replacement + original[match.end :]
        self.editor.replace_line_texts({match.line_index: new_text}, operation="replace_current")

        preferred = min(state.active_index, len(state.matches) - 1)
        self.update_results(preferred_index=preferred)
        return True

    def replace_all(self) -> int:
        """Replace every match in one undoable step.

        Returns:
            Number of matches replaced.
        """

        state = self.state
        if not state.is_open:
            return 0
        self.refresh_if_stale()
        if not state.matches or state.regex_error is not None:
            return 0

        lines = self.editor.lines
        texts: dict[int, str] = {}
        for line_index, spans in state.matches_by_line.items():
            original = lines[line_index].text
            pieces: list[str] = []
            cursor = 0
            for span in sorted(spans, key=lambda s: s.start):
                match = state.matches[span.index]
                pieces.append(original[cursor : match.start])
                pieces.append(apply_replacement_pattern(match, state.replacement, original, state.use_regex))
                cursor = match.end
            pieces.append(original[cursor:])
            texts[line_index] = "".join(pieces)

        count = len(state.matches)
        self.editor.replace_line_texts(texts, operation="replace_all")
        logger.info("Replaced %d matches on %d lines", count, len(texts))
        self.update_results()
        return count
