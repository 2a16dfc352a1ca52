"""Pure functions for extracting and filling ``{{key}}`` placeholders."""

from __future__ import annotations

import re
from collections.abc import Mapping

from prompt_distiller.l1_entities.template import Variable

PLACEHOLDER_RE = re.compile(r'\{\{([^}]+)\}\}')


def parse_variables(content: str) -> list[Variable]:
    """Return the distinct placeholder variables of *content* in first-occurrence order."""
    seen: set[str] = set()
    variables: list[Variable] = []
    for match in PLACEHOLDER_RE.finditer(content):
        key = match.group(1).strip()
        if not key or key in seen:
            continue
        seen.add(key)
        variables.append(Variable(key=key))
    return variables


def render_template(content: str, values: Mapping[str, str]) -> str:
    """Fill every placeholder in *content*.

    Keys with an empty or missing value render as ``[key]``; keys in *values*
    that do not appear in the content are ignored.
    """

    def _fill(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        if not key:
            return match.group(0)
        value = values.get(key)
        return value if value else f'[{key}]'

    return PLACEHOLDER_RE.sub(_fill, content)
