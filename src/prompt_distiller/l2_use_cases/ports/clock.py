"""Ports: time and id sources."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):  # pragma: no cover -- abstract Protocol; never instantiated directly
    def now(self) -> datetime: ...


class IdGenerator(Protocol):  # pragma: no cover -- abstract Protocol; never instantiated directly
    def next(self) -> str:
        """Return an id never handed out before."""
        ...
