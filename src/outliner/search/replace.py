"""Replacement pattern expansion."""

from __future__ import annotations

from outliner.models.search import Match

_DIGITS = "0123456789"


def apply_replacement_pattern(match: Match, pattern: str, full_text: str, use_regex: bool) -> str:
    """Expand `$` references in `pattern` for one match.

    Literal mode returns `pattern` unchanged. Regex mode understands `$$`, `$&`, `` $` ``,
    `$'`, `$<name>` and `$N` / `$NN` (at most two digits). Unknown or unmatched groups expand
    to the empty string; any other `$` is kept literally.

    Args:
        match: The match being replaced.
        pattern: Replacement pattern typed by the user.
        full_text: Text of the line the match was found on.
        use_regex: Whether the search ran in regex mode.

    Returns:
        The expanded replacement text.
    """

    if not use_regex or "$" not in pattern:
        return pattern

    groups = match.group_values or []
    named = match.named_groups or {}
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch != "$" or i == n - 1:
            out.append(ch)
            i += 1
            continue

        nxt = pattern[i + 1]
        if nxt == "$":
            out.append("$")
            i += 2
            continue
        if nxt == "&":
            out.append(match.text)
            i += 2
            continue
        if nxt == "`":
            out.append(full_text[: match.start])
            i += 2
            continue
        if nxt == "'":
            out.append(full_text[match.end :])
            i += 2
            continue
        if nxt == "<":
            closing = pattern.find(">", i + 2)
            if closing != -1:
                name = pattern[i + 2 : closing]
                if name in named:
                    out.append(named[name] or "")
                i = closing + 1
                continue
        if nxt in _DIGITS:
            j = i + 1
            while j < n and j - (i + 1) < 2 and pattern[j] in _DIGITS:
                j += 1
            index = int(pattern[i + 1 : j])
            value = groups[index - 1] if 0 < index <= len(groups) else None
            out.append(value or "")
            i = j
            continue

        out.append(ch)
        i += 1
    return "".join(out)
