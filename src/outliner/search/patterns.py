"""Regex pattern compilation for search queries.

Queries use the browser flavour of named groups (`(?<name>...)`, `\\k<name>`); they are
rewritten to Python's `(?P<name>...)` / `(?P=name)` before compiling.
"""

from __future__ import annotations

import re

# Escapes are consumed first so that `\(?<` is never rewritten
_SYNTAX_RE = re.compile(r"\\k<(?P<backref>\w+)>|\\.|\(\?<(?=[A-Za-z_])")


def translate_pattern(query: str) -> str:
    """Rewrite named-group syntax into Python's `re` dialect."""

    def repl(match: re.Match[str]) -> str:
        token = match.group(0)
        if match.group("backref"):
            return f"(?P={match.group('backref')})"
        if token.startswith("\\"):
            return token
        return "(?P<"

    return _SYNTAX_RE.sub(repl, query)


def compile_pattern(query: str, case_sensitive: bool) -> tuple[re.Pattern[str] | None, str | None]:
    """Compile a search query.

    Returns:
        `(pattern, None)` on success, `(None, message)` when the query is not a valid regex.
    """

    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(translate_pattern(query), flags), None
    except re.error as e:
        return None, f"Invalid regular expression: {e}"
