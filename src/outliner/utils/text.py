"""Small text and number helpers shared by the editor and search code."""

from __future__ import annotations

import re

_WORD_CHAR_RE = re.compile(r"[A-Za-z0-9_]")


def clamp(value: int, low: int, high: int) -> int:
    """Clamp `value` into `[low, high]`; swapped bounds are accepted."""

    if low > high:
        low, high = high, low
    return max(low, min(high, value))


def normalize_newlines(text: str) -> str:
    """Convert CRLF line endings to LF."""

    return text.replace("\r\n", "\n")


def is_word_char(ch: str) -> bool:
    return len(ch) == 1 and _WORD_CHAR_RE.match(ch) is not None


def find_word_boundary(text: str, index: int, direction: int) -> int:
    """Find the edge of the word-class run next to `index`.

    Characters are either word (`[A-Za-z0-9_]`) or non-word. Moving left returns the start of
    the run ending just before `index`; moving right returns the end of the run at `index`.
    """

    def char_at(i: int) -> str:
        return text[i] if 0 <= i < len(text) else ""

    if direction < 0:
        i = max(0, index - 1)
        target = is_word_char(char_at(i))
        while i > 0 and is_word_char(char_at(i - 1)) == target:
            i -= 1
        return i

    i = min(len(text), max(0, index))
    target = is_word_char(char_at(i)) if i < len(text) else is_word_char(char_at(i - 1))
    while i < len(text) and is_word_char(char_at(i)) == target:
        i += 1
    return i
