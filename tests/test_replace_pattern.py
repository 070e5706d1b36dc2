"""Tests for replacement pattern expansion."""

from __future__ import annotations

from outliner.models.search import Match
from outliner.search.replace import apply_replacement_pattern


def _match(
    text: str = "cat",
    start: int = 0,
    groups: list[str | None] | None = None,
    named: dict[str, str | None] | None = None,
) -> Match:
    return Match(
        line_index=0,
        start=start,
        end=start + len(text),
        text=text,
        group_values=groups,
        named_groups=named,
    )


def test_whole_match_and_dollar_escape() -> None:
    """It should expand `$&` and collapse `$$`."""

    assert apply_replacement_pattern(_match(), "[$&]", "cat", True) == "[cat]"
    assert apply_replacement_pattern(_match(), "$$", "cat", True) == "$"


def test_positional_groups() -> None:
    """It should substitute 1-indexed groups and blank out missing ones."""

    match = _match("red 5", groups=["red", "5"])

    assert apply_replacement_pattern(match, "$1-$2", "red 5", True) == "red-5"
    assert apply_replacement_pattern(match, "<$3>", "red 5", True) == "<>"
    assert apply_replacement_pattern(match, "<$0>", "red 5", True) == "<>"
    assert apply_replacement_pattern(match, "$1x", "red 5", True) == "redx"
    assert apply_replacement_pattern(_match(groups=["a"]), "$12", "cat", True) == ""
    assert apply_replacement_pattern(_match(groups=[None]), "[$1]", "cat", True) == "[]"


def test_context_references() -> None:
    """It should expand the text before and after the match."""

    match = _match("cat", start=1)

    assert apply_replacement_pattern(match, "$`|$'", "xcaty", True) == "x|y"


def test_named_groups() -> None:
    """It should expand known names and drop unknown ones."""

    match = _match(named={"name": "v"})

    assert apply_replacement_pattern(match, "<$<name>>", "cat", True) == "<v>"
    assert apply_replacement_pattern(match, "<$<missing>>", "cat", True) == "<>"


def test_literal_mode_and_plain_dollars() -> None:
    """It should leave the pattern untouched outside regex mode."""

    assert apply_replacement_pattern(_match(), "$&", "cat", False) == "$&"
    assert apply_replacement_pattern(_match(), "cost: $", "cat", True) == "cost: $"
    assert apply_replacement_pattern(_match(), "$x", "cat", True) == "$x"
