"""Bounded per-template content history."""

from __future__ import annotations

from datetime import datetime

from prompt_distiller.l1_entities.template import HistoryEntry, Template

MAX_HISTORY = 10


def snapshot(template: Template, now: datetime) -> HistoryEntry:
    """Append the template's current content to its history, evicting the oldest beyond MAX_HISTORY."""
    entry = HistoryEntry(content=template.content, timestamp=now)
    template.history.append(entry)
    overflow = len(template.history) - MAX_HISTORY
    if overflow > 0:
        del template.history[:overflow]
    return entry
