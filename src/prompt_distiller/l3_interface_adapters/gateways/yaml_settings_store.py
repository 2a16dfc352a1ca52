"""Gateway: YAML settings file — implements SettingsStore port."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

log = logging.getLogger('pd.settings')


class YamlSettingsStore:
    """Loads and saves the settings namespace as a YAML mapping."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_raw(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = yaml.safe_load(self._path.read_text(encoding='utf-8')) or {}
        except (OSError, yaml.YAMLError) as e:
            log.warning('Ignoring unreadable settings %s: %s', self._path, e)
            return {}
        if not isinstance(data, dict):
            log.warning('Ignoring settings %s: top level is not a mapping', self._path)
            return {}
        return data

    def save(self, settings: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                yaml.safe_dump(settings, allow_unicode=True, sort_keys=False),
                encoding='utf-8',
            )
        except OSError:
            log.error('Failed to write settings to %s', self._path, exc_info=True)


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
