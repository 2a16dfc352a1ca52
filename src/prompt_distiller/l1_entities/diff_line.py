"""Diff line entity — one row of a positional comparison between two texts."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

DiffKind = Literal['same', 'add', 'remove', 'change']


class DiffLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DiffKind
    before_line: int | None = None
    after_line: int | None = None
    before_text: str | None = None
    after_text: str | None = None

    @property
    def text(self) -> str:
        """Display text: the after side when present, otherwise the before side."""
        if self.after_text is not None:
            return self.after_text
        return self.before_text or ''

    @property
    def marker(self) -> str:
        return {'same': ' ', 'add': '+', 'remove': '-', 'change': '~'}[self.kind]
