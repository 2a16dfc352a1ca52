"""Use case: fill a template's variables, copy the result, record usage."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from prompt_distiller.l1_entities.errors import ClipboardUnavailableError
from prompt_distiller.l1_entities.template import Template
from prompt_distiller.l2_use_cases.ports.clipboard import Clipboard
from prompt_distiller.l2_use_cases.template_repository import TemplateRepository
from prompt_distiller.l2_use_cases.utils.variable_parser import render_template

log = logging.getLogger('pd.repo')


@dataclass(frozen=True)
class FillResult:
    text: str = ''
    copied: bool = False
    error: str = ''

    @property
    def ok(self) -> bool:
        return self.copied


def initial_values(template: Template) -> dict[str, str]:
    """Pre-fill values for a fill form from each variable's default."""
    return {v.key: v.default for v in template.variables}


class FillTemplateUseCase:
    """Renders a template and copies it; usage is recorded only when the copy succeeds."""

    def __init__(self, repository: TemplateRepository, clipboard: Clipboard) -> None:
        self._repo = repository
        self._clipboard = clipboard

    def execute(self, template_id: str, values: Mapping[str, str]) -> FillResult:
        template = self._repo.get(template_id)
        if template is None:
            return FillResult(error=f'Template not found: {template_id}')

        text = render_template(template.content, values)
        try:
            self._clipboard.write(text)
        except ClipboardUnavailableError as e:
            log.warning('Copy failed for template %s: %s', template_id, e)
            return FillResult(text=text, error=f'Copy failed: {e}')

        self._repo.record_usage(template_id)
        return FillResult(text=text, copied=True)
