"""Line store and the implicit tree derived from it."""

from __future__ import annotations

from outliner.document.store import LineStore
from outliner.document.tree import TreeIndex

__all__ = ["LineStore", "TreeIndex"]
