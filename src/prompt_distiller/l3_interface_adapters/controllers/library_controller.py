"""LibraryController — facade the TUI and CLI talk to; owns draft and settings state."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from pydantic import ValidationError

from prompt_distiller.l1_entities.diff_line import DiffLine
from prompt_distiller.l1_entities.draft import Draft
from prompt_distiller.l1_entities.settings import AppSettings
from prompt_distiller.l2_use_cases.fill_template_use_case import FillResult, FillTemplateUseCase
from prompt_distiller.l2_use_cases.ports.clipboard import Clipboard
from prompt_distiller.l2_use_cases.ports.clock import Clock
from prompt_distiller.l2_use_cases.ports.draft_store import DraftStore
from prompt_distiller.l2_use_cases.ports.settings_store import SettingsStore
from prompt_distiller.l2_use_cases.template_repository import CreateResult, TemplateRepository
from prompt_distiller.l2_use_cases.utils.text_diff import compute_diff
from prompt_distiller.l3_interface_adapters.gateways.yaml_settings_store import deep_merge

log = logging.getLogger('pd.controller')

PREVIEW_CHARS = 100


@dataclass(frozen=True)
class ClipboardOutcome:
    """What happened to a piece of captured clipboard text."""

    preview: str
    created: CreateResult | None = None

    @property
    def saved(self) -> bool:
        return self.created is not None and self.created.ok


class LibraryController:
    """Central orchestrator bridging the template repository to the front-ends.

    The repository stays the only owner of templates; this class adds the
    draft buffer, the settings namespace and the clipboard entry point.
    """

    def __init__(
        self,
        repository: TemplateRepository,
        clipboard: Clipboard,
        draft_store: DraftStore,
        settings_store: SettingsStore,
        clock: Clock,
        build_settings: Callable[[dict], AppSettings],
    ) -> None:
        self._repo = repository
        self._drafts = draft_store
        self._settings_store = settings_store
        self._clock = clock
        self._build_settings = build_settings
        self._fill_uc = FillTemplateUseCase(repository, clipboard)

        self._raw_settings: dict = settings_store.load_raw()
        self.draft: Draft | None = draft_store.load()

    @property
    def repository(self) -> TemplateRepository:
        return self._repo

    # --- saving and filling ---

    def save_template(self, content: str, name: str = '', category_csv: str = '') -> CreateResult:
        """Create a template from user input; the draft is cleared only on success."""
        result = self._repo.create(content, name, category_csv)
        if result.ok:
            self.clear_draft()
        return result

    def fill_and_copy(self, template_id: str, values: Mapping[str, str]) -> FillResult:
        return self._fill_uc.execute(template_id, values)

    # --- history ---

    def compare_with_version(self, template_id: str, index: int = 0) -> list[DiffLine] | None:
        """Diff history entry *index* (0 = oldest retained) against the current content."""
        template = self._repo.get(template_id)
        if template is None:
            return None
        before = template.history[index].content if 0 <= index < len(template.history) else ''
        return compute_diff(before, template.content)

    def restore(self, template_id: str, index: int) -> bool:
        template = self._repo.get(template_id)
        if template is None or not 0 <= index < len(template.history):
            return False
        return self._repo.restore_version(template_id, template.history[index])

    # --- draft buffer ---

    def save_draft(self, content: str, name: str = '', category_csv: str = '') -> Draft:
        self.draft = Draft(content=content, name=name, category_csv=category_csv, timestamp=self._clock.now())
        self._drafts.save(self.draft)
        return self.draft

    def clear_draft(self) -> None:
        self.draft = None
        self._drafts.clear()

    # --- clipboard ---

    def on_clipboard_text(self, text: str) -> ClipboardOutcome:
        """Handle text from the clipboard watcher (already filtered for ignore keywords).

        With auto-capture on, the text becomes a template immediately; otherwise
        it is staged as the draft for the user to name and save.
        """
        preview = text[:PREVIEW_CHARS]
        if self.settings.clipboard_monitor.auto_capture:
            result = self._repo.create(text)
            log.info('Auto-captured clipboard text (ok=%s)', result.ok)
            return ClipboardOutcome(preview=preview, created=result)
        self.save_draft(text)
        return ClipboardOutcome(preview=preview)

    def set_clipboard_monitor(self, enabled: bool) -> None:
        if self.settings.clipboard_monitor.enabled != enabled:
            self.apply_settings_patch({'clipboard_monitor': {'enabled': enabled}})

    # --- settings passthrough ---

    @property
    def settings(self) -> AppSettings:
        try:
            return self._build_settings(self._raw_settings)
        except ValidationError as e:
            log.warning('Stored settings are invalid, using defaults: %s', e.errors(include_url=False))
            return self._build_settings({})

    def get_settings_snapshot(self) -> dict:
        return copy.deepcopy(self._raw_settings)

    def apply_settings_patch(self, patch: dict) -> dict:
        """Deep-merge *patch* into the stored settings, persist, and return the new snapshot.

        Raises ValidationError, leaving the stored settings untouched, when the merged result is invalid.
        """
        merged = deep_merge(copy.deepcopy(self._raw_settings), copy.deepcopy(patch))
        self._build_settings(merged)
        self._raw_settings = merged
        self._settings_store.save(self._raw_settings)
        log.info('Settings updated: %s', sorted(patch))
        return self.get_settings_snapshot()
