"""Settings Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ThemeSettings(BaseModel):
    accent_color: str
    background_image: str = ''
    glass_effect: bool = True


class ClipboardMonitorSettings(BaseModel):
    enabled: bool
    auto_capture: bool = False
    ignore_keywords: list[str] = Field(default_factory=list)
    poll_interval: float = Field(gt=0)


class AppSettings(BaseModel):
    # Unknown keys written by other front-ends survive a load/save cycle.
    model_config = ConfigDict(extra='allow')

    theme: ThemeSettings
    clipboard_monitor: ClipboardMonitorSettings
