"""Fill modal — one field per template variable; returns the entered values."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static, TextArea

from prompt_distiller.l1_entities.template import Template
from prompt_distiller.l2_use_cases.fill_template_use_case import initial_values


class FillModal(ModalScreen[dict[str, str] | None]):
    """Copy → values dict, Escape → None."""

    DEFAULT_CSS = """
    FillModal {
        align: center middle;
    }

    FillModal > VerticalScroll {
        width: 80;
        max-height: 90%;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    FillModal #fill-title {
        text-style: bold;
        margin-bottom: 1;
    }

    FillModal .var-label {
        margin-top: 1;
    }

    FillModal TextArea {
        height: 6;
    }

    FillModal #fill-buttons {
        height: auto;
        margin-top: 1;
        align-horizontal: center;
    }

    FillModal #fill-buttons Button {
        margin: 0 1;
    }
    """

    BINDINGS = [('escape', 'cancel', 'Cancel')]

    def __init__(self, template: Template, **kwargs) -> None:
        super().__init__(**kwargs)
        self._template = template

    def compose(self) -> ComposeResult:
        defaults = initial_values(self._template)
        with VerticalScroll():
            yield Static(self._template.name, id='fill-title', markup=False)
            if not self._template.variables:
                yield Static('[dim]No variables — the content is copied as is.[/dim]', markup=True)
            # Widget ids are positional: variable keys may contain characters ids cannot.
            for i, var in enumerate(self._template.variables):
                yield Static(var.label, classes='var-label', markup=False)
                if var.type == 'textarea':
                    yield TextArea(defaults[var.key], id=f'var-{i}')
                else:
                    yield Input(value=defaults[var.key], placeholder=var.default, id=f'var-{i}')
            with Horizontal(id='fill-buttons'):
                yield Button('Cancel', id='fill-cancel')
                yield Button('Copy', id='fill-copy', variant='primary')

    def collect_values(self) -> dict[str, str]:
        values: dict[str, str] = {}
        for i, var in enumerate(self._template.variables):
            widget = self.query_one(f'#var-{i}')
            values[var.key] = widget.text if isinstance(widget, TextArea) else widget.value
        return values

    def on_input_submitted(self, _event: Input.Submitted) -> None:
        self.dismiss(self.collect_values())

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == 'fill-copy':
            self.dismiss(self.collect_values())
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
