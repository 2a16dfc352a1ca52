"""Port: system clipboard access."""

from __future__ import annotations

from typing import Protocol


class Clipboard(Protocol):  # pragma: no cover -- abstract Protocol; never instantiated directly
    """Raises ClipboardUnavailableError when the platform clipboard cannot be used."""

    def read(self) -> str: ...

    def write(self, text: str) -> None: ...
