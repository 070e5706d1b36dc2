"""Tree / visibility index.

Interprets the flat indent-tagged line list as an implicit tree. No parent/child pointers are
stored; every relationship is recomputed from indent comparisons. Only the visible-line list is
cached, keyed by the store version.
"""

from __future__ import annotations

from typing import Iterator

from outliner.document.store import LineStore


class TreeIndex:
    """Pull-based structural queries over a `LineStore`."""

    def __init__(self, store: LineStore) -> None:
        self._store = store
        self._visible_cache: list[int] | None = None
        self._cache_version = -1

    def invalidate(self) -> None:
        self._visible_cache = None

    def parent(self, index: int) -> int | None:
        """Nearest preceding line with a strictly smaller indent, or None for roots."""

        lines = self._store.lines
        indent = lines[index].indent
        for i in range(index - 1, -1, -1):
            if lines[i].indent < indent:
                return i
        return None

    def ancestors(self, index: int) -> Iterator[int]:
        current = self.parent(index)
        while current is not None:
            yield current
            current = self.parent(current)

    def has_children(self, index: int) -> bool:
        lines = self._store.lines
        nxt = index + 1
        if nxt >= len(lines):
            return False
        return lines[nxt].indent > lines[index].indent

    def descendant_end(self, index: int) -> int:
        """First index after `index` whose indent is `<=` its own.

        `[index, descendant_end(index))` is the block owned by the line.
        """

        lines = self._store.lines
        base = lines[index].indent
        i = index + 1
        while i < len(lines) and lines[i].indent > base:
            i += 1
        return i

    def is_visible(self, index: int) -> bool:
        lines = self._store.lines
        return not any(lines[a].collapsed for a in self.ancestors(index))

    def visible_lines(self) -> list[int]:
        if self._visible_cache is not None and self._cache_version == self._store.version:
            return self._visible_cache

        result: list[int] = []
        # Indent of the outermost collapsed line whose block we are inside
        hidden_below: int | None = None
        for i, line in enumerate(self._store.lines):
            if hidden_below is not None and line.indent > hidden_below:
                continue
            hidden_below = None
            result.append(i)
            if line.collapsed:
                hidden_below = line.indent

        self._visible_cache = result
        self._cache_version = self._store.version
        return result

    def visible_index(self, index: int) -> int:
        try:
            return self.visible_lines().index(index)
        except ValueError:
            return -1

    def previous_visible(self, index: int) -> int | None:
        pos = self.visible_index(index)
        if pos <= 0:
            return None
        return self.visible_lines()[pos - 1]

    def next_visible(self, index: int) -> int | None:
        visible = self.visible_lines()
        pos = self.visible_index(index)
        if pos == -1 or pos >= len(visible) - 1:
            return None
        return visible[pos + 1]
