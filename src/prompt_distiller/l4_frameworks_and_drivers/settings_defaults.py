"""Settings defaults and validation — infrastructure concern, lives in L4."""

from __future__ import annotations

import copy

from prompt_distiller.l1_entities.settings import AppSettings
from prompt_distiller.l3_interface_adapters.gateways.yaml_settings_store import deep_merge

SETTINGS_DEFAULTS: dict = {
    'theme': {
        'accent_color': '#10B981',
        'background_image': '',
        'glass_effect': True,
    },
    'clipboard_monitor': {
        'enabled': False,
        'auto_capture': False,
        'ignore_keywords': ['password', 'token', '密钥', '密码', 'secret', 'api_key', 'apikey'],
        'poll_interval': 0.5,
    },
}


def build_settings(raw: dict) -> AppSettings:
    """Merge *raw* stored settings on top of defaults, then validate."""
    merged = copy.deepcopy(SETTINGS_DEFAULTS)
    deep_merge(merged, copy.deepcopy(raw))
    return AppSettings.model_validate(merged)
