"""Draft entity — an unsaved in-progress template entry."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Draft(BaseModel):
    content: str = ''
    name: str = ''
    category_csv: str = ''
    timestamp: datetime

    @property
    def is_empty(self) -> bool:
        return not (self.content.strip() or self.name.strip() or self.category_csv.strip())
