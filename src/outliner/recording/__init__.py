"""Recording utilities for document events."""

from __future__ import annotations

from outliner.recording.file_recorder import FileEventRecorder, iter_events

__all__ = ["FileEventRecorder", "iter_events"]
