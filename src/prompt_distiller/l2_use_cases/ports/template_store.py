"""Port: whole-collection template storage."""

from __future__ import annotations

from typing import Protocol

from prompt_distiller.l1_entities.template import Template


class TemplateStore(Protocol):  # pragma: no cover -- abstract Protocol; never instantiated directly
    """Abstract durable storage for the template collection."""

    def load(self) -> list[Template]:
        """Load the full collection. Falls back to the seed set when absent or unreadable."""
        ...

    def persist(self, templates: list[Template]) -> bool:
        """Write the full collection. Returns False (after logging) on failure."""
        ...
