"""Line store.

The authoritative, ordered list of lines plus the monotonic `version` counter. Only the editor
engine mutates it; everything derived from it (tree index, search results) compares versions
to detect staleness.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator

from outliner.models.line import Attachment, Line
from outliner.utils.ids import new_line_id


class LineStore:
    """Ordered sequence of lines; never empty."""

    def __init__(
        self,
        lines: Iterable[Line] | None = None,
        *,
        id_factory: Callable[[], str] = new_line_id,
    ) -> None:
        self._id_factory = id_factory
        self._lines: list[Line] = list(lines or [])
        for line in self._lines:
            if not line.id:
                line.id = self._id_factory()
        if not self._lines:
            self._lines.append(self.create_line(""))
        self.version = 0

    # Construction -----------------------------------------------------------

    def create_line(self, text: str = "", indent: int = 0, collapsed: bool = False) -> Line:
        return Line(id=self._id_factory(), text=text, indent=max(0, indent), collapsed=collapsed)

    def create_attachment_line(self, attachment: Attachment, indent: int = 0) -> Line:
        return Line(
            id=self._id_factory(),
            type="image",
            indent=max(0, indent),
            attachment=attachment.model_copy(deep=True),
        )

    def new_id(self) -> str:
        return self._id_factory()

    # Read access ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def __getitem__(self, index: int) -> Line:
        return self._lines[index]

    @property
    def lines(self) -> list[Line]:
        """The live line list. Callers outside the engine must treat it as read-only."""

        return self._lines

    def last_index(self) -> int:
        return len(self._lines) - 1

    # Mutation (engine only) ---------------------------------------------------

    def bump(self) -> int:
        self.version += 1
        return self.version

    def insert(self, index: int, *lines: Line) -> None:
        self._lines[index:index] = list(lines)

    def remove(self, start: int, count: int = 1) -> list[Line]:
        removed = self._lines[start : start + count]
        del self._lines[start : start + count]
        if not self._lines:
            self._lines.append(self.create_line(""))
        return removed

    def replace(self, index: int, line: Line) -> None:
        self._lines[index] = line

    def splice(self, start: int, count: int, *lines: Line) -> None:
        """Replace `count` lines at `start` with `lines`."""

        self._lines[start : start + count] = list(lines)
        if not self._lines:
            self._lines.append(self.create_line(""))

    def move_range(self, start: int, count: int, insert_at: int) -> None:
        """Cut `count` lines at `start` and reinsert them at `insert_at` (post-cut index)."""

        block = self._lines[start : start + count]
        del self._lines[start : start + count]
        self._lines[insert_at:insert_at] = block

    def reset(self, lines: Iterable[Line]) -> None:
        self._lines = list(lines)
        if not self._lines:
            self._lines.append(self.create_line(""))

    def clone_lines(self) -> list[Line]:
        return [line.clone() for line in self._lines]
