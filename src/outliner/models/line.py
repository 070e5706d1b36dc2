"""Line models.

A document is a flat list of lines. Nesting is encoded by `indent` only; the tree is derived
on demand by `outliner.document.tree.TreeIndex`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LineType = Literal["text", "image"]


class Attachment(BaseModel):
    """Opaque non-text payload carried by an attachment line."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    src: str
    width: float = 0
    height: float = 0
    natural_width: float | None = None
    natural_height: float | None = None
    name: str = ""
    mime_type: str = ""

    def model_post_init(self, __context: object) -> None:
        if self.natural_width is None:
            self.natural_width = self.width
        if self.natural_height is None:
            self.natural_height = self.height


class Line(BaseModel):
    """A single outline line.

    Text lines have a caret range of `[0, len(text)]`. Attachment lines are atomic: their
    caret range is `[0, 1]` (before / after) and their `text` is always empty.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""
    text: str = ""
    indent: int = Field(default=0, ge=0)
    collapsed: bool = False
    type: LineType = "text"
    attachment: Attachment | None = None

    def is_atomic(self) -> bool:
        return self.type == "image"

    def length(self) -> int:
        """Caret length of the line."""

        if self.is_atomic():
            return 1
        return len(self.text)

    def clone(self) -> "Line":
        return self.model_copy(deep=True)
