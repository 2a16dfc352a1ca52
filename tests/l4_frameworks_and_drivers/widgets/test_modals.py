"""Tests for the fill, capture and confirm modals — each pushed from a bare host App."""

from __future__ import annotations

import pytest
from textual.app import App
from textual.widgets import Input, TextArea

from prompt_distiller.l1_entities.template import Variable
from prompt_distiller.l4_frameworks_and_drivers.widgets.capture_modal import CaptureModal, CaptureResult
from prompt_distiller.l4_frameworks_and_drivers.widgets.confirm_modal import ConfirmModal
from prompt_distiller.l4_frameworks_and_drivers.widgets.fill_modal import FillModal
from tests.conftest import make_template

SIZE = (120, 40)


class _Host(App[None]):
    def __init__(self, modal) -> None:
        super().__init__()
        self._modal = modal
        self.results: list = []

    def on_mount(self) -> None:
        self.push_screen(self._modal, callback=self.results.append)


class TestFillModal:
    @pytest.fixture
    def template(self):
        return make_template(
            content='{{lang}}: {{code}}',
            variables=[
                Variable(key='lang', label='Language', default='python'),
                Variable(key='code', label='Code', type='textarea'),
            ],
        )

    @pytest.mark.asyncio
    async def test_fields_prefilled_from_defaults(self, template):
        app = _Host(FillModal(template))
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            modal = app.screen
            assert modal.query_one('#var-0', Input).value == 'python'
            assert isinstance(modal.query_one('#var-1'), TextArea)
            assert modal.collect_values() == {'lang': 'python', 'code': ''}

    @pytest.mark.asyncio
    async def test_copy_returns_values(self, template):
        app = _Host(FillModal(template))
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            app.screen.query_one('#var-1', TextArea).load_text('print(1)')
            await pilot.click('#fill-copy')
            await pilot.pause()
        assert app.results == [{'lang': 'python', 'code': 'print(1)'}]

    @pytest.mark.asyncio
    async def test_escape_returns_none(self, template):
        app = _Host(FillModal(template))
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            await pilot.press('escape')
            await pilot.pause()
        assert app.results == [None]

    @pytest.mark.asyncio
    async def test_enter_in_input_submits(self, template):
        app = _Host(FillModal(template))
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            app.screen.query_one('#var-0', Input).focus()
            await pilot.press('enter')
            await pilot.pause()
        assert app.results == [{'lang': 'python', 'code': ''}]


class TestCaptureModal:
    @pytest.mark.asyncio
    async def test_save_returns_fields(self):
        app = _Host(CaptureModal('body', 'Name', 'a,b'))
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            await pilot.click('#capture-save')
            await pilot.pause()
        assert app.results == [CaptureResult(content='body', name='Name', category_csv='a,b', save=True)]

    @pytest.mark.asyncio
    async def test_cancel_keeps_input_unsaved(self):
        app = _Host(CaptureModal('body'))
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            await pilot.click('#capture-cancel')
            await pilot.pause()
        (result,) = app.results
        assert result.save is False
        assert result.content == 'body'


class TestConfirmModal:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(('key', 'expected'), [('y', True), ('n', False), ('escape', False)])
    async def test_keys(self, key, expected):
        app = _Host(ConfirmModal('Delete?'))
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            await pilot.press(key)
            await pilot.pause()
        assert app.results == [expected]
