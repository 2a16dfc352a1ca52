"""Capture modal — name, categories and content for a new template."""

from __future__ import annotations

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static, TextArea


@dataclass(frozen=True)
class CaptureResult:
    content: str
    name: str
    category_csv: str
    save: bool


class CaptureModal(ModalScreen[CaptureResult]):
    """Save → CaptureResult(save=True); Escape/Cancel → CaptureResult(save=False) so input can become a draft."""

    DEFAULT_CSS = """
    CaptureModal {
        align: center middle;
    }

    CaptureModal > Vertical {
        width: 80;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    CaptureModal #capture-title {
        text-style: bold;
        margin-bottom: 1;
    }

    CaptureModal #capture-content {
        height: 10;
        margin-top: 1;
    }

    CaptureModal #capture-buttons {
        height: auto;
        margin-top: 1;
        align-horizontal: center;
    }

    CaptureModal #capture-buttons Button {
        margin: 0 1;
    }
    """

    BINDINGS = [('escape', 'cancel', 'Cancel')]

    def __init__(self, content: str = '', name: str = '', category_csv: str = '', **kwargs) -> None:
        super().__init__(**kwargs)
        self._content = content
        self._name = name
        self._category_csv = category_csv

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static('Save prompt as template', id='capture-title')
            yield Input(value=self._name, placeholder='Template name', id='capture-name')
            yield Input(value=self._category_csv, placeholder='Categories (comma separated)', id='capture-category')
            yield TextArea(self._content, id='capture-content')
            with Horizontal(id='capture-buttons'):
                yield Button('Cancel', id='capture-cancel')
                yield Button('Save', id='capture-save', variant='primary')

    def _result(self, *, save: bool) -> CaptureResult:
        return CaptureResult(
            content=self.query_one('#capture-content', TextArea).text,
            name=self.query_one('#capture-name', Input).value,
            category_csv=self.query_one('#capture-category', Input).value,
            save=save,
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(self._result(save=event.button.id == 'capture-save'))

    def action_cancel(self) -> None:
        self.dismiss(self._result(save=False))
