"""Ignore-keyword check applied to clipboard text before it leaves the watcher."""

from __future__ import annotations

from collections.abc import Iterable


def contains_ignored_keyword(text: str, ignore_keywords: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(kw and kw.lower() in lowered for kw in ignore_keywords)
