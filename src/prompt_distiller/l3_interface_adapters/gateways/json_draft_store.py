"""Gateway: JSON file storage for the single draft record — implements DraftStore port."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from prompt_distiller.l1_entities.draft import Draft
from prompt_distiller.l3_interface_adapters.gateways.paths import DRAFT_FILENAME

log = logging.getLogger('pd.store')


class JsonDraftStore:
    def __init__(self, data_dir: Path) -> None:
        self._path = data_dir / DRAFT_FILENAME

    def load(self) -> Draft | None:
        if not self._path.exists():
            return None
        try:
            return Draft.model_validate_json(self._path.read_bytes())
        except (OSError, ValidationError) as e:
            log.warning('Ignoring unreadable draft %s: %s', self._path, e)
            return None

    def save(self, draft: Draft) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(draft.model_dump_json(indent=2), encoding='utf-8')
        except OSError:
            log.error('Failed to write draft to %s', self._path, exc_info=True)

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError:
            log.error('Failed to remove draft %s', self._path, exc_info=True)
