"""ID utilities."""

from __future__ import annotations

import itertools
from typing import Callable
import uuid


def new_line_id() -> str:
    """Return a fresh, globally unique line id."""

    return str(uuid.uuid4())


def new_session_id(prefix: str = "ed_") -> str:
    """Return a short editor session id used for log context."""

    return f"{prefix}{uuid.uuid4().hex[:8]}"


def sequential_id_factory(prefix: str = "line-") -> Callable[[], str]:
    """Return a deterministic id source for tests and fixtures.

    Args:
        prefix: ID prefix.

    Returns:
        A zero-argument callable yielding `line-0001`, `line-0002`, ...
    """

    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter):04d}"
