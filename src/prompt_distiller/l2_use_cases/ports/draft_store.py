"""Port: single-record draft buffer storage."""

from __future__ import annotations

from typing import Protocol

from prompt_distiller.l1_entities.draft import Draft


class DraftStore(Protocol):  # pragma: no cover -- abstract Protocol; never instantiated directly
    def load(self) -> Draft | None:
        """Return the saved draft, or None if there is none (or it is unreadable)."""
        ...

    def save(self, draft: Draft) -> None: ...

    def clear(self) -> None: ...
