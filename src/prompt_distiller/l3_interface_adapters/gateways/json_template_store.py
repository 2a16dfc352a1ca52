"""Gateway: JSON file storage for the template collection — implements TemplateStore port."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from prompt_distiller.l1_entities.errors import CorruptStoreError
from prompt_distiller.l1_entities.template import Template
from prompt_distiller.l2_use_cases.ports.clock import Clock
from prompt_distiller.l3_interface_adapters.gateways.paths import TEMPLATES_FILENAME
from prompt_distiller.l3_interface_adapters.gateways.seed_templates import load_seed_templates

log = logging.getLogger('pd.store')

_COLLECTION = TypeAdapter(list[Template])


class JsonTemplateStore:
    """Reads and writes the whole collection as one JSON array."""

    def __init__(self, data_dir: Path, clock: Clock) -> None:
        self._path = data_dir / TEMPLATES_FILENAME
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Template]:
        if not self._path.exists():
            log.info('No template library at %s; using seed templates', self._path)
            return self._seed()
        try:
            return read_collection(self._path)
        except CorruptStoreError as e:
            log.warning('Template library unreadable (%s); using seed templates', e)
            return self._seed()

    def persist(self, templates: list[Template]) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(_COLLECTION.dump_json(templates, indent=2))
        except OSError:
            log.error('Failed to write template library to %s', self._path, exc_info=True)
            return False
        log.debug('Wrote %d templates to %s', len(templates), self._path.name)
        return True

    def _seed(self) -> list[Template]:
        return load_seed_templates(self._clock.now())


def read_collection(path: Path) -> list[Template]:
    """Parse a template library file. Raises CorruptStoreError on unreadable or invalid data."""
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise CorruptStoreError(f'cannot read {path}: {e}') from e
    try:
        return _COLLECTION.validate_json(raw)
    except ValidationError as e:
        raise CorruptStoreError(f'invalid template library {path.name}: {e}') from e
