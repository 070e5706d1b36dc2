"""Match computation over the line list.

Matching is single-line only. A scope restricts the scanned line range and clips character
offsets on its first and last lines. Regex scans poll an injected clock after every match and
after every line; exceeding the budget discards all partial results.
"""

from __future__ import annotations

import time
from typing import Callable, Sequence

from outliner.logging import get_logger
from outliner.models.line import Line
from outliner.models.search import Match, SearchError, SearchOutcome
from outliner.models.selection import Selection
from outliner.search.patterns import compile_pattern

logger = get_logger(__name__)


class _Deadline:
    """Cooperative wall-clock budget for one scan."""

    def __init__(self, timeout_ms: float, clock: Callable[[], float]) -> None:
        self.timeout_ms = timeout_ms
        self._clock = clock
        self._expires_at = clock() + timeout_ms / 1000.0 if timeout_ms > 0 else None
        self.expired = False

    def check(self) -> bool:
        if self._expires_at is None:
            return False
        if self._clock() > self._expires_at:
            self.expired = True
        return self.expired


def format_timeout(timeout_ms: float) -> str:
    if timeout_ms >= 1000:
        seconds = timeout_ms / 1000
        return f"{seconds:g}s" if seconds == int(seconds) else f"{seconds:.1f}s"
    return f"{timeout_ms:g}ms"


def _line_limits(line: Line, line_index: int, scope: Selection | None) -> tuple[int, int]:
    limit_start = scope.start.char_index if scope and line_index == scope.start.line_index else 0
    limit_end = scope.end.char_index if scope and line_index == scope.end.line_index else len(line.text)
    return limit_start, limit_end


def compute_matches(
    lines: Sequence[Line],
    query: str,
    *,
    use_regex: bool = False,
    case_sensitive: bool = False,
    scope: Selection | None = None,
    timeout_ms: float = 0,
    clock: Callable[[], float] = time.monotonic,
) -> SearchOutcome:
    """Find every occurrence of `query` in `lines`.

    Args:
        lines: Document lines; attachment lines have empty text and never match.
        query: Literal text or regex source. An empty query yields no matches.
        use_regex: Treat `query` as a regular expression.
        case_sensitive: Match case exactly.
        scope: Optional normalized selection restricting the search.
        timeout_ms: Scan budget; 0 disables the deadline.
        clock: Monotonic clock in seconds.

    Returns:
        SearchOutcome: matches in document order, or an error with no matches.
    """

    if not query:
        return SearchOutcome()

    start_line = scope.start.line_index if scope else 0
    end_line = min(scope.end.line_index if scope else len(lines) - 1, len(lines) - 1)
    deadline = _Deadline(timeout_ms, clock)
    matches: list[Match] = []

    if use_regex:
        pattern, error = compile_pattern(query, case_sensitive)
        if pattern is None:
            logger.warning("Search pattern rejected: %s", error)
            return SearchOutcome(error=SearchError(kind="invalid_pattern", message=error or ""))
        has_named = bool(pattern.groupindex)

        for line_index in range(start_line, end_line + 1):
            line = lines[line_index]
            limit_start, limit_end = _line_limits(line, line_index, scope)
            if limit_start >= limit_end:
                continue
            for m in pattern.finditer(line.text):
                if m.end() == m.start():
                    continue
                if m.start() < limit_start or m.end() > limit_end:
                    continue
                matches.append(
                    Match(
                        line_index=line_index,
                        start=m.start(),
                        end=m.end(),
                        text=m.group(0),
                        group_values=list(m.groups()) if pattern.groups else None,
                        named_groups=m.groupdict() if has_named else None,
                    )
                )
                if deadline.check():
                    break
            if deadline.check():
                break
    else:
        needle = query if case_sensitive else query.lower()
        for line_index in range(start_line, end_line + 1):
            line = lines[line_index]
            haystack = line.text if case_sensitive else line.text.lower()
            limit_start, limit_end = _line_limits(line, line_index, scope)
            if limit_start >= limit_end:
                continue
            index = haystack.find(needle, limit_start)
            while index != -1 and index + len(needle) <= limit_end:
                matches.append(
                    Match(
                        line_index=line_index,
                        start=index,
                        end=index + len(needle),
                        text=line.text[index : index + len(needle)],
                    )
                )
                index = haystack.find(needle, index + len(needle))
                if deadline.check():
                    break
            if deadline.check():
                break

    if deadline.expired:
        message = f"Search timed out after {format_timeout(timeout_ms)}"
        logger.warning("%s (query=%r)", message, query)
        return SearchOutcome(error=SearchError(kind="timeout", message=message))
    return SearchOutcome(matches=matches)
