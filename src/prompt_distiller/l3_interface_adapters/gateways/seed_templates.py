"""Gateway: built-in seed templates shipped as package data."""

from __future__ import annotations

from datetime import datetime
from importlib import resources

import yaml

from prompt_distiller.l1_entities.template import Template

_SEEDS_FILE = resources.files('prompt_distiller') / 'seeds' / 'templates.yaml'


def load_seed_templates(now: datetime) -> list[Template]:
    """Return fresh copies of the built-in templates, stamped with *now*."""
    raw = yaml.safe_load(_SEEDS_FILE.read_text(encoding='utf-8')) or []
    return [Template.model_validate({**item, 'created_at': now, 'updated_at': now}) for item in raw]
