"""Search and replace over outline lines."""

from __future__ import annotations

from outliner.search.controller import MatchSpan, SearchController, SearchState
from outliner.search.matcher import compute_matches
from outliner.search.patterns import compile_pattern, translate_pattern
from outliner.search.replace import apply_replacement_pattern

__all__ = [
    "MatchSpan",
    "SearchController",
    "SearchState",
    "apply_replacement_pattern",
    "compile_pattern",
    "compute_matches",
    "translate_pattern",
]
