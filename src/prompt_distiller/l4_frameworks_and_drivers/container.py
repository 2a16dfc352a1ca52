"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from prompt_distiller.l2_use_cases.ports.clipboard import Clipboard
from prompt_distiller.l2_use_cases.ports.clock import Clock, IdGenerator
from prompt_distiller.l2_use_cases.ports.draft_store import DraftStore
from prompt_distiller.l2_use_cases.ports.settings_store import SettingsStore
from prompt_distiller.l2_use_cases.ports.template_store import TemplateStore
from prompt_distiller.l2_use_cases.template_repository import TemplateRepository
from prompt_distiller.l3_interface_adapters.controllers.library_controller import LibraryController
from prompt_distiller.l3_interface_adapters.gateways.json_draft_store import JsonDraftStore
from prompt_distiller.l3_interface_adapters.gateways.json_template_store import JsonTemplateStore
from prompt_distiller.l3_interface_adapters.gateways.paths import DATA_DIR, SETTINGS_PATH
from prompt_distiller.l3_interface_adapters.gateways.pyperclip_clipboard import PyperclipClipboard
from prompt_distiller.l3_interface_adapters.gateways.system_clock import SystemClock, TimeIdGenerator
from prompt_distiller.l3_interface_adapters.gateways.yaml_settings_store import YamlSettingsStore
from prompt_distiller.l4_frameworks_and_drivers.settings_defaults import build_settings
from prompt_distiller.l4_frameworks_and_drivers.workers.clipboard_worker import ClipboardWatcher


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        data_dir: Path | None = None,
        settings_path: Path | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self.data_dir = data_dir or DATA_DIR
        self.settings_path = settings_path or SETTINGS_PATH

        self.clock: Clock = SystemClock()
        self.id_generator: IdGenerator = TimeIdGenerator()
        self.clipboard: Clipboard = clipboard or PyperclipClipboard()
        self.template_store: TemplateStore = JsonTemplateStore(self.data_dir, self.clock)
        self.draft_store: DraftStore = JsonDraftStore(self.data_dir)
        self.settings_store: SettingsStore = YamlSettingsStore(self.settings_path)

        self.repository = TemplateRepository(self.template_store, self.clock, self.id_generator)
        self.controller = LibraryController(
            repository=self.repository,
            clipboard=self.clipboard,
            draft_store=self.draft_store,
            settings_store=self.settings_store,
            clock=self.clock,
            build_settings=build_settings,
        )

    def clipboard_watcher(self, on_text: Callable[[str], None]) -> ClipboardWatcher:
        monitor = self.controller.settings.clipboard_monitor
        return ClipboardWatcher(
            self.clipboard,
            on_text,
            ignore_keywords=monitor.ignore_keywords,
            interval=monitor.poll_interval,
        )
