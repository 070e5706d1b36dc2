"""Snapshot files.

Snapshots are stored as UTF-8 JSON in the camelCase interchange shape. A plain outline text
file (one line per row, two spaces per indent level) can be imported as well.
"""

from __future__ import annotations

import json
from pathlib import Path

from outliner.models.line import Line
from outliner.models.snapshot import EditorSnapshot

INDENT_UNIT = "  "


def read_snapshot(path: Path) -> EditorSnapshot:
    """Load and validate a snapshot JSON file.

    Raises:
        pydantic.ValidationError: If the file does not match the snapshot shape.
    """

    return EditorSnapshot.model_validate_json(path.read_text(encoding="utf-8"))


def write_snapshot(path: Path, snapshot: EditorSnapshot) -> Path:
    """Write a snapshot as pretty-printed JSON."""

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(snapshot.to_json_dict(), ensure_ascii=False, indent=2)
    path.write_text(payload + "\n", encoding="utf-8")
    return path


def parse_outline_text(text: str) -> list[Line]:
    """Turn indented plain text into lines; ids are left blank for the editor to assign."""

    lines: list[Line] = []
    for raw in text.replace("\r\n", "\n").split("\n"):
        stripped = raw.lstrip(" ")
        depth = (len(raw) - len(stripped)) // len(INDENT_UNIT)
        lines.append(Line(text=stripped, indent=depth))
    if len(lines) > 1 and not lines[-1].text and lines[-1].indent == 0:
        lines.pop()
    return lines


def load_document(path: Path) -> EditorSnapshot:
    """Load a `.json` snapshot or a plain outline text file."""

    if path.suffix.lower() == ".json":
        return read_snapshot(path)
    return EditorSnapshot(lines=parse_outline_text(path.read_text(encoding="utf-8")))
