"""Textual Message subclasses — contracts between the clipboard worker and the App."""

from __future__ import annotations

from textual.message import Message


class ClipboardCaptured(Message):
    """Posted from the watcher thread when new (non-ignored) clipboard text appears."""

    def __init__(self, text: str) -> None:
        super().__init__()
        self.text = text


class LibraryChanged(Message):
    """Posted after any committed repository mutation."""
