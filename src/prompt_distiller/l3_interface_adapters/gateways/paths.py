"""Shared path constants for settings and the template library."""

from __future__ import annotations

from platformdirs import user_config_path, user_data_path

APP_NAME = 'prompt-distiller'

CONFIG_DIR = user_config_path(APP_NAME)
DATA_DIR = user_data_path(APP_NAME)

SETTINGS_PATH = CONFIG_DIR / 'settings.yaml'
TEMPLATES_FILENAME = 'templates.json'
DRAFT_FILENAME = 'draft.json'
LOG_FILENAME = 'pd_debug.log'
