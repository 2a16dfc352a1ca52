"""Port: settings storage, kept apart from the template namespace."""

from __future__ import annotations

from typing import Protocol


class SettingsStore(Protocol):  # pragma: no cover -- abstract Protocol; never instantiated directly
    def load_raw(self) -> dict:
        """Return the stored settings as a plain dict (empty when absent or unreadable)."""
        ...

    def save(self, settings: dict) -> None: ...
