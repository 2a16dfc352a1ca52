"""Tests for the library TUI — drives LibraryApp through Textual's pilot."""

from __future__ import annotations

from datetime import timedelta

import pytest
from textual.widgets import Input, ListView

from prompt_distiller.l1_entities.template import TemplatePatch
from prompt_distiller.l2_use_cases.template_repository import TemplateRepository
from prompt_distiller.l3_interface_adapters.controllers.library_controller import LibraryController
from prompt_distiller.l4_frameworks_and_drivers.apps.library import (
    LibraryApp,
    TemplateRow,
    history_markdown,
    similar_markdown,
    template_markdown,
)
from prompt_distiller.l4_frameworks_and_drivers.messages import ClipboardCaptured
from prompt_distiller.l4_frameworks_and_drivers.settings_defaults import build_settings
from prompt_distiller.l4_frameworks_and_drivers.widgets.capture_modal import CaptureModal
from prompt_distiller.l4_frameworks_and_drivers.widgets.confirm_modal import ConfirmModal
from prompt_distiller.l4_frameworks_and_drivers.widgets.fill_modal import FillModal
from prompt_distiller.l4_frameworks_and_drivers.workers.clipboard_worker import ClipboardWatcher
from tests.conftest import (
    T0,
    FakeClipboard,
    FakeClock,
    FakeDraftStore,
    FakeIdGenerator,
    FakeSettingsStore,
    FakeTemplateStore,
    make_template,
)

SIZE = (120, 40)


def _make_app(
    clipboard: FakeClipboard | None = None,
    settings: dict | None = None,
    with_watcher: bool = False,
    templates: list | None = None,
):
    templates = templates or [
        make_template('a', content='Hello {{name}}', name='Greeting', category=['greet'], created_at=T0),
        make_template('b', content='Review this code', name='Review', category=['work'], created_at=T0 + timedelta(1)),
    ]
    clipboard = clipboard or FakeClipboard()
    clock = FakeClock(T0 + timedelta(days=30))
    repo = TemplateRepository(FakeTemplateStore(templates), clock, FakeIdGenerator())
    controller = LibraryController(
        repository=repo,
        clipboard=clipboard,
        draft_store=FakeDraftStore(),
        settings_store=FakeSettingsStore(settings),
        clock=clock,
        build_settings=build_settings,
    )

    def factory(on_text):
        return ClipboardWatcher(clipboard, on_text, interval=60)

    return LibraryApp(controller=controller, watcher_factory=factory if with_watcher else None), repo, clipboard


async def _focus_list(app, pilot) -> None:
    app.query_one('#template-list', ListView).focus()
    await pilot.pause()


class TestLayout:
    @pytest.mark.asyncio
    async def test_rows_in_presentation_order(self):
        app, _repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            rows = list(app.query('#template-list TemplateRow'))
            assert [r.template_id for r in rows] == ['b', 'a']

    @pytest.mark.asyncio
    async def test_search_filters_rows(self):
        app, _repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await pilot.press(*'hello')
            await pilot.pause()
            rows = list(app.query('#template-list TemplateRow'))
            assert [r.template_id for r in rows] == ['a']

    @pytest.mark.asyncio
    async def test_letters_in_search_do_not_trigger_actions(self):
        app, repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await pilot.press('p')
            await pilot.pause()
            assert app.query_one('#search-input', Input).value == 'p'
            assert not any(t.pinned for t in repo.all())


class TestActions:
    @pytest.mark.asyncio
    async def test_pin_moves_row_to_top(self):
        app, repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('down')
            await pilot.press('p')
            await pilot.pause()
            assert repo.get('a').pinned
            rows = list(app.query('#template-list TemplateRow'))
            assert rows[0].template_id == 'a'

    @pytest.mark.asyncio
    async def test_cycle_category(self):
        app, _repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('c')
            await pilot.pause()
            assert app._category == 'greet'
            assert [r.template_id for r in app.query('#template-list TemplateRow')] == ['a']

    @pytest.mark.asyncio
    async def test_delete_after_confirmation(self):
        app, repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('x')
            await pilot.pause()
            assert isinstance(app.screen, ConfirmModal)
            await pilot.press('y')
            await pilot.pause()
            assert repo.get('b') is None
            assert len(app.query('#template-list TemplateRow')) == 1

    @pytest.mark.asyncio
    async def test_delete_cancelled(self):
        app, repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('x')
            await pilot.pause()
            await pilot.press('escape')
            await pilot.pause()
            assert repo.get('b') is not None

    @pytest.mark.asyncio
    async def test_delete_template_with_brackets_in_name(self):
        app, repo, _clip = _make_app(templates=[make_template('z', name='oops [/bold] name', content='x')])
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('x')
            await pilot.pause()
            assert isinstance(app.screen, ConfirmModal)
            await pilot.press('y')
            await pilot.pause()
            assert repo.get('z') is None

    @pytest.mark.asyncio
    async def test_restore_latest_version(self):
        app, repo, _clip = _make_app()
        repo.update('b', TemplatePatch(content='v2'))
        repo.update('b', TemplatePatch(content='v3'))
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('r')
            await pilot.pause()
            assert repo.get('b').content == 'v2'


class TestFill:
    @pytest.mark.asyncio
    async def test_enter_opens_fill_and_copy_records_usage(self):
        app, repo, clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('down')
            await pilot.press('enter')
            await pilot.pause()
            assert isinstance(app.screen, FillModal)

            app.screen.query_one('#var-0', Input).value = 'Ada'
            await pilot.click('#fill-copy')
            await pilot.pause()

            assert clip.writes == ['Hello Ada']
            assert repo.get('a').usage.count == 1

    @pytest.mark.asyncio
    async def test_cancel_fill_copies_nothing(self):
        app, repo, clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('enter')
            await pilot.pause()
            await pilot.press('escape')
            await pilot.pause()
            assert clip.writes == []
            assert repo.get('b').usage.count == 0

    @pytest.mark.asyncio
    async def test_fill_template_with_brackets_in_name(self):
        app, _repo, clip = _make_app(templates=[make_template('z', name='oops [/bold] name', content='Hi {{name}}')])
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('enter')
            await pilot.pause()
            assert isinstance(app.screen, FillModal)
            await pilot.click('#fill-copy')
            await pilot.pause()
            assert clip.writes == ['Hi [name]']


class TestClipboardCapture:
    @pytest.mark.asyncio
    async def test_captured_text_opens_capture_modal(self):
        app, repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            app.post_message(ClipboardCaptured('Summarize {{topic}}'))
            await pilot.pause()
            assert isinstance(app.screen, CaptureModal)
            assert app._controller.draft.content == 'Summarize {{topic}}'

            app.screen.query_one('#capture-name', Input).value = 'Summary'
            await pilot.click('#capture-save')
            await pilot.pause()

            created = [t for t in repo.all() if t.name == 'Summary']
            assert len(created) == 1
            assert [v.key for v in created[0].variables] == ['topic']
            assert app._controller.draft is None

    @pytest.mark.asyncio
    async def test_auto_capture_saves_directly(self):
        app, repo, _clip = _make_app(settings={'clipboard_monitor': {'auto_capture': True}})
        async with app.run_test(size=SIZE) as pilot:
            app.post_message(ClipboardCaptured('Translate {{text}}'))
            await pilot.pause()
            assert not isinstance(app.screen, CaptureModal)
            assert len(repo) == 3
            assert len(app.query('#template-list TemplateRow')) == 3

    @pytest.mark.asyncio
    async def test_escape_from_capture_keeps_draft(self):
        app, repo, _clip = _make_app()
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('n')
            await pilot.pause()
            assert isinstance(app.screen, CaptureModal)
            app.screen.query_one('#capture-content').load_text('half written')
            await pilot.press('escape')
            await pilot.pause()
            assert app._controller.draft.content == 'half written'
            assert len(repo) == 2


class TestWatcher:
    @pytest.mark.asyncio
    async def test_toggle_watch_persists_setting(self):
        app, _repo, _clip = _make_app(with_watcher=True)
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('w')
            await pilot.pause()
            assert app.watching
            assert app._controller.settings.clipboard_monitor.enabled is True
            await pilot.press('w')
            await pilot.pause()
            assert not app.watching
            assert app._controller.settings.clipboard_monitor.enabled is False

    @pytest.mark.asyncio
    async def test_toggle_watch_with_invalid_settings_keeps_running(self):
        app, _repo, _clip = _make_app(settings={'theme': 'broken'}, with_watcher=True)
        async with app.run_test(size=SIZE) as pilot:
            await _focus_list(app, pilot)
            await pilot.press('w')
            await pilot.pause()
            assert app.watching
            assert app._controller.get_settings_snapshot() == {'theme': 'broken'}
        assert not app.watching

    @pytest.mark.asyncio
    async def test_starts_when_enabled_and_stops_on_quit(self):
        app, _repo, _clip = _make_app(settings={'clipboard_monitor': {'enabled': True}}, with_watcher=True)
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            assert app.watching
            await _focus_list(app, pilot)
            await pilot.press('q')
            await pilot.pause()
        assert not app.watching


class TestMarkdownHelpers:
    def test_template_markdown(self):
        md = template_markdown(make_template(content='Hello {{name}}', pinned=True))
        assert '## Greeting' in md
        assert '`name`' in md
        assert 'Hello {{name}}' in md

    def test_similar_markdown_empty(self):
        assert 'No similar templates' in similar_markdown(make_template(), [])

    def test_history_markdown_without_versions(self):
        assert 'No earlier versions' in history_markdown(make_template(), None)

    def test_row_escapes_markup(self):
        row = TemplateRow(make_template(name='[bold]x'))
        assert '\\[bold]x' in row._label_text
