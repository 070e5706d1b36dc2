"""Cursor point and selection helpers."""

from __future__ import annotations

from outliner.models.selection import Point, Selection


def compare_points(a: Point, b: Point) -> int:
    """Lexicographic comparison by `(line_index, char_index)`; negative, zero or positive."""

    if a.line_index != b.line_index:
        return a.line_index - b.line_index
    return a.char_index - b.char_index


def normalize_selection(selection: Selection | None) -> Selection | None:
    """Return `selection` ordered so that `start <= end`, or None."""

    if selection is None:
        return None
    if compare_points(selection.start, selection.end) <= 0:
        return selection
    return Selection(start=selection.end, end=selection.start)


def selection_line_range(selection: Selection | None) -> tuple[int, int] | None:
    normalized = normalize_selection(selection)
    if normalized is None:
        return None
    return normalized.start.line_index, normalized.end.line_index


def shift_point(point: Point | None, start: int, end: int, delta: int) -> Point | None:
    """Shift a point by `delta` lines if it falls inside `[start, end]`."""

    if point is None:
        return None
    if point.line_index < start or point.line_index > end:
        return point
    return Point(line_index=point.line_index + delta, char_index=point.char_index)
