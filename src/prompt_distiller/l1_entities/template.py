"""Template Pydantic models — pure data, no I/O."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_TEMPLATE_NAME = 'New Template'
DEFAULT_CATEGORY = 'Uncategorized'
ALL_CATEGORIES = 'All'

VariableType = Literal['string', 'textarea']


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are taken to be UTC so aware and naive values stay comparable."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Variable(BaseModel):
    key: str
    label: str = ''
    type: VariableType = 'string'
    default: str = ''

    @model_validator(mode='after')
    def _label_defaults_to_key(self) -> Variable:
        if not self.label:
            self.label = self.key
        return self


class Usage(BaseModel):
    count: int = Field(default=0, ge=0)
    last_used: datetime | None = None

    @field_validator('last_used')
    @classmethod
    def _last_used_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class HistoryEntry(BaseModel):
    """A prior version of a template's content and when it was captured."""

    model_config = ConfigDict(frozen=True)

    content: str
    timestamp: datetime

    @field_validator('timestamp')
    @classmethod
    def _timestamp_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class Template(BaseModel):
    id: str
    name: str = DEFAULT_TEMPLATE_NAME
    content: str
    category: list[str] = Field(default_factory=lambda: [DEFAULT_CATEGORY])
    tags: list[str] = Field(default_factory=list)
    variables: list[Variable] = Field(default_factory=list)
    usage: Usage = Field(default_factory=Usage)
    history: list[HistoryEntry] = Field(default_factory=list)
    pinned: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator('created_at', 'updated_at')
    @classmethod
    def _timestamps_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @field_validator('category')
    @classmethod
    def _category_never_empty(cls, v: list[str]) -> list[str]:
        cleaned = [c.strip() for c in v if c.strip()]
        return cleaned or [DEFAULT_CATEGORY]

    @property
    def recency(self) -> datetime:
        """Timestamp used for presentation order: last use, else creation."""
        return self.usage.last_used or self.created_at


class TemplatePatch(BaseModel):
    """Partial edit of a template. ``None`` fields are left untouched."""

    name: str | None = None
    content: str | None = None
    category: list[str] | None = None


class SimilarMatch(BaseModel):
    template: Template
    similarity: float


def split_category_csv(category_csv: str) -> list[str]:
    """Split a comma-separated category string, dropping blanks; never empty."""
    parts = [part.strip() for part in category_csv.split(',')]
    return [p for p in parts if p] or [DEFAULT_CATEGORY]
