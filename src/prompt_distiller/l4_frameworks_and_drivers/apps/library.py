"""Library app — browse, fill, capture and curate templates in the terminal."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError
from rich.markup import escape
from textual import on
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Key
from textual.widgets import Input, ListItem, ListView, Markdown, Static

from prompt_distiller.l1_entities.diff_line import DiffLine
from prompt_distiller.l1_entities.template import ALL_CATEGORIES, SimilarMatch, Template, TemplatePatch
from prompt_distiller.l2_use_cases.utils.similarity import BROAD_THRESHOLD
from prompt_distiller.l3_interface_adapters.controllers.library_controller import LibraryController
from prompt_distiller.l4_frameworks_and_drivers.editor import edit_text, resolve_editor
from prompt_distiller.l4_frameworks_and_drivers.messages import ClipboardCaptured, LibraryChanged
from prompt_distiller.l4_frameworks_and_drivers.widgets.capture_modal import CaptureModal, CaptureResult
from prompt_distiller.l4_frameworks_and_drivers.widgets.confirm_modal import ConfirmModal
from prompt_distiller.l4_frameworks_and_drivers.widgets.fill_modal import FillModal
from prompt_distiller.l4_frameworks_and_drivers.workers.clipboard_worker import ClipboardWatcher

log = logging.getLogger('pd.app')

WatcherFactory = Callable[[Callable[[str], None]], ClipboardWatcher]


def template_markdown(t: Template) -> str:
    pin = ' 📌' if t.pinned else ''
    lines = [
        f'## {t.name}{pin}',
        '',
        f'**Categories:** {", ".join(t.category)}',
    ]
    if t.tags:
        lines.append(f'**Tags:** {", ".join(t.tags)}')
    last = t.usage.last_used.strftime('%Y-%m-%d %H:%M') if t.usage.last_used else 'never'
    lines.append(f'**Used:** {t.usage.count}× (last: {last})  **Versions:** {len(t.history)}')
    if t.variables:
        lines += ['', '### Variables']
        lines += [f'- `{v.key}` {v.label} [{v.type}]' + (f' = {v.default}' if v.default else '') for v in t.variables]
    lines += ['', '---', '', '```', t.content, '```']
    return '\n'.join(lines)


def similar_markdown(t: Template, matches: list[SimilarMatch]) -> str:
    lines = [f'## Similar to "{t.name}"', '']
    if not matches:
        lines.append('*No similar templates*')
    for m in matches:
        lines.append(f'- **{m.template.name}** — {round(m.similarity * 100)}% similar')
    return '\n'.join(lines)


def history_markdown(t: Template, diff: list[DiffLine] | None) -> str:
    lines = [f'## History of "{t.name}"', '']
    if not t.history:
        lines.append('*No earlier versions*')
        return '\n'.join(lines)
    for i, entry in enumerate(t.history):
        first_line = entry.content.split('\n', 1)[0]
        lines.append(f'{i + 1}. `{entry.timestamp:%Y-%m-%d %H:%M}` {first_line}')
    if diff is not None:
        lines += ['', '### Oldest version → current', '', '```diff']
        for d in diff:
            if d.kind == 'change':
                lines += [f'-{d.before_text}', f'+{d.after_text}']
            else:
                lines.append(f'{d.marker}{d.text}')
        lines.append('```')
    return '\n'.join(lines)


class TemplateRow(ListItem):
    """Selectable row representing a single template."""

    def __init__(self, template: Template) -> None:
        super().__init__()
        self.template_id = template.id
        pin = '📌 ' if template.pinned else ''
        self._label_text = f'{pin}{escape(template.name)}  [dim]{template.usage.count}×[/dim]'

    def compose(self) -> ComposeResult:
        yield Static(self._label_text, markup=True)


class LibraryApp(App[None]):
    CSS = """
    #library-header {
        dock: top;
        height: 1;
        background: $primary;
        color: $text;
        text-style: bold;
        padding: 0 1;
    }
    #library-footer {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    #library-layout {
        height: 1fr;
    }
    #list-pane {
        width: 1fr;
        min-width: 28;
        max-width: 48;
    }
    #search-input {
        dock: top;
        margin: 0 0 1 0;
    }
    #template-list {
        border: solid $primary;
        scrollbar-size: 1 1;
    }
    #template-preview {
        width: 3fr;
        border: solid $secondary;
        padding: 1 2;
        scrollbar-size: 1 1;
    }
    #preview-md {
        height: auto;
    }
    """

    BINDINGS = [
        Binding('ctrl+q', 'exit_app', 'Quit', priority=True),
        Binding('escape', 'back', 'Back'),
    ]

    def __init__(
        self,
        controller: LibraryController,
        watcher_factory: WatcherFactory | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._controller = controller
        self._repo = controller.repository
        self._watcher: ClipboardWatcher | None = (
            watcher_factory(lambda text: self.post_message(ClipboardCaptured(text))) if watcher_factory else None
        )
        self._category = ALL_CATEGORIES
        self._current_id: str | None = None
        self._unsubscribe = self._repo.subscribe(lambda: self.post_message(LibraryChanged()))

    # --- layout ---

    def compose(self) -> ComposeResult:
        yield Static(self._header_text(), id='library-header', markup=True)
        with Horizontal(id='library-layout'):
            with Vertical(id='list-pane'):
                yield Input(placeholder='Search templates...', id='search-input')
                yield ListView(id='template-list')
            with VerticalScroll(id='template-preview', can_focus=False):
                yield Markdown('', id='preview-md')
        yield Static(self._footer_text(), id='library-footer', markup=True)

    def _header_text(self) -> str:
        watching = '  [bold]● watching clipboard[/bold]' if self.watching else ''
        return f'  prompt-distiller | category: {escape(self._category)} | {len(self._repo)} templates{watching}'

    @staticmethod
    def _footer_text() -> str:
        return (
            r'\[Enter] Fill  \[n] New  \[p] Pin  \[e] Edit  \[x] Delete  \[c] Category  '
            r'\[s] Similar  \[h] History  \[r] Restore  \[w] Watch  \[q] Quit'
        )

    @property
    def watching(self) -> bool:
        return self._watcher is not None and self._watcher.running

    def on_mount(self) -> None:
        self._rebuild_list()
        self.query_one('#search-input', Input).focus()
        if self._watcher is not None and self._controller.settings.clipboard_monitor.enabled:
            self._watcher.start()
            self._refresh_header()
        draft = self._controller.draft
        if draft is not None and not draft.is_empty:
            self.notify('Unsaved draft restored — press n to continue it')

    def on_unmount(self) -> None:
        self._stop_watcher()

    def _stop_watcher(self) -> None:
        self._unsubscribe()
        if self._watcher is not None:
            self._watcher.stop()

    # --- list / preview ---

    def _search_text(self) -> str:
        return self.query_one('#search-input', Input).value

    def _rebuild_list(self) -> None:
        list_view = self.query_one('#template-list', ListView)
        list_view.clear()
        templates = self._repo.query(self._category, self._search_text())
        keep_index = 0
        for i, t in enumerate(templates):
            list_view.append(TemplateRow(t))
            if t.id == self._current_id:
                keep_index = i
        if templates:
            list_view.index = keep_index
            self._current_id = templates[keep_index].id
            self._show_template(self._current_id)
        else:
            self._current_id = None
            self.query_one('#preview-md', Markdown).update('*No matching templates*')
        self._refresh_header()

    def _refresh_header(self) -> None:
        self.query_one('#library-header', Static).update(self._header_text())

    def _show_template(self, template_id: str) -> None:
        t = self._repo.get(template_id)
        if t is not None:
            self.query_one('#preview-md', Markdown).update(template_markdown(t))

    # Modal inputs bubble up to the App too; only the search box drives the list.
    @on(Input.Changed, '#search-input')
    def _search_changed(self) -> None:
        self._rebuild_list()

    @on(Input.Submitted, '#search-input')
    def _search_submitted(self) -> None:
        self.query_one('#template-list', ListView).focus()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        if isinstance(event.item, TemplateRow):
            self._current_id = event.item.template_id
            self._show_template(event.item.template_id)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, TemplateRow):
            self._current_id = event.item.template_id
            self.action_fill()

    def on_library_changed(self, _message: LibraryChanged) -> None:
        self._rebuild_list()

    # --- keys ---

    _KEY_ACTIONS = {
        'n': 'new',
        'p': 'pin',
        'e': 'edit',
        'x': 'delete',
        'c': 'cycle_category',
        's': 'similar',
        'h': 'history',
        'r': 'restore',
        'w': 'toggle_watch',
        'q': 'exit_app',
    }

    def on_key(self, event: Key) -> None:
        # Letter shortcuts only apply on the main screen with the list focused;
        # the search Input swallows printable keys before they get here.
        if len(self.screen_stack) > 1 or isinstance(self.focused, Input):
            if event.key == 'down' and self.focused is self.query_one('#search-input', Input):
                self.query_one('#template-list', ListView).focus()
                event.prevent_default()
            return
        action = self._KEY_ACTIONS.get(event.key)
        if action is not None:
            event.prevent_default()
            getattr(self, f'action_{action}')()

    def action_back(self) -> None:
        if len(self.screen_stack) > 1:
            return
        if not isinstance(self.focused, Input):
            self.query_one('#search-input', Input).focus()
        elif self._search_text():
            self.query_one('#search-input', Input).value = ''
        else:
            self.action_exit_app()

    def action_exit_app(self) -> None:
        self._stop_watcher()
        self.exit()

    # --- fill ---

    def action_fill(self) -> None:
        if self._current_id is None:
            return
        template = self._repo.get(self._current_id)
        if template is None:
            return
        template_id = template.id

        def _on_values(values: dict[str, str] | None) -> None:
            if values is None:
                return
            result = self._controller.fill_and_copy(template_id, values)
            if result.ok:
                self.notify('Copied to clipboard')
            else:
                self.notify(result.error, severity='error')

        self.push_screen(FillModal(template), callback=_on_values)

    # --- capture ---

    def action_new(self) -> None:
        draft = self._controller.draft
        if draft is not None:
            self._open_capture(draft.content, draft.name, draft.category_csv)
        else:
            self._open_capture()

    def _open_capture(self, content: str = '', name: str = '', category_csv: str = '') -> None:
        self.push_screen(CaptureModal(content, name, category_csv), callback=self._on_capture)

    def _on_capture(self, result: CaptureResult | None) -> None:
        if result is None:
            return
        if not result.save:
            if result.content.strip() or result.name.strip():
                self._controller.save_draft(result.content, result.name, result.category_csv)
            else:
                self._controller.clear_draft()
            return
        created = self._controller.save_template(result.content, result.name, result.category_csv)
        if not created.ok:
            self.notify(created.error, severity='error')
            return
        self._current_id = created.template.id
        if created.similar_count:
            self.notify(f'Saved — found {created.similar_count} similar template(s)', severity='warning')
        else:
            self.notify('Saved to library')

    def on_clipboard_captured(self, message: ClipboardCaptured) -> None:
        outcome = self._controller.on_clipboard_text(message.text)
        if outcome.created is not None:
            if outcome.saved:
                self.notify(f'Captured from clipboard: {outcome.preview}')
            return
        if len(self.screen_stack) > 1:
            self.notify(f'New clipboard text kept as draft: {outcome.preview}')
            return
        self._open_capture(message.text)

    # --- curation ---

    def action_pin(self) -> None:
        if self._current_id is not None:
            self._repo.toggle_pin(self._current_id)

    def action_delete(self) -> None:
        if self._current_id is None:
            return
        template = self._repo.get(self._current_id)
        if template is None:
            return
        template_id = template.id

        def _on_confirm(confirmed: bool | None) -> None:
            if confirmed and self._repo.delete(template_id):
                self.notify(f'Deleted "{template.name}"')

        self.push_screen(ConfirmModal(f'Delete template [bold]"{escape(template.name)}"[/bold]?'), callback=_on_confirm)

    def action_edit(self) -> None:
        """Open the highlighted template's content in $EDITOR and save it as a new version."""
        if self._current_id is None:
            return
        template = self._repo.get(self._current_id)
        if template is None:
            return
        editor_argv = resolve_editor()
        if editor_argv is None:
            self.notify('No editor found ($VISUAL / $EDITOR)', severity='error')
            return
        try:
            with self.suspend():
                edited = edit_text(editor_argv, template.content)
        except SuspendNotSupported:
            self.notify('Cannot open editor in this environment', severity='error')
            return
        edited = edited.rstrip('\n')
        if edited == template.content:
            return
        result = self._repo.update(template.id, TemplatePatch(content=edited))
        if not result.ok:
            self.notify(result.error, severity='error')

    def action_cycle_category(self) -> None:
        choices = self._repo.categories()
        idx = choices.index(self._category) if self._category in choices else 0
        self._category = choices[(idx + 1) % len(choices)]
        self._rebuild_list()

    def action_similar(self) -> None:
        if self._current_id is None:
            return
        template = self._repo.get(self._current_id)
        if template is None:
            return
        matches = self._repo.find_similar(template.id, BROAD_THRESHOLD)
        self.query_one('#preview-md', Markdown).update(similar_markdown(template, matches))

    def action_history(self) -> None:
        if self._current_id is None:
            return
        template = self._repo.get(self._current_id)
        if template is None:
            return
        diff = self._controller.compare_with_version(template.id, 0) if template.history else None
        self.query_one('#preview-md', Markdown).update(history_markdown(template, diff))

    def action_restore(self) -> None:
        """Restore the most recent earlier version of the highlighted template."""
        if self._current_id is None:
            return
        template = self._repo.get(self._current_id)
        if template is None or not template.history:
            self.notify('No earlier version to restore', severity='warning')
            return
        if self._controller.restore(template.id, len(template.history) - 1):
            self.notify('Restored previous version')

    def action_toggle_watch(self) -> None:
        if self._watcher is None:
            self.notify('Clipboard watcher unavailable', severity='warning')
            return
        running = self._watcher.toggle()
        try:
            self._controller.set_clipboard_monitor(running)
        except ValidationError:
            log.warning('Clipboard watcher toggled but settings could not be saved', exc_info=True)
            self.notify('Settings file is invalid; watch state not saved', severity='warning')
        self._refresh_header()
        self.notify('Watching clipboard' if running else 'Stopped watching clipboard')
