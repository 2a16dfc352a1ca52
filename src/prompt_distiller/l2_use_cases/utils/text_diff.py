"""Positional line diff between two versions of a text.

Lines are compared index by index, not aligned by a longest-common-subsequence
pass: inserting one line near the top marks every following line as changed.
"""

from __future__ import annotations

from prompt_distiller.l1_entities.diff_line import DiffLine


def compute_diff(before: str, after: str) -> list[DiffLine]:
    before_lines = before.split('\n')
    after_lines = after.split('\n')
    diff: list[DiffLine] = []
    for i in range(max(len(before_lines), len(after_lines))):
        old = before_lines[i] if i < len(before_lines) else ''
        new = after_lines[i] if i < len(after_lines) else ''
        lineno = i + 1
        if old == new:
            diff.append(DiffLine(kind='same', before_line=lineno, after_line=lineno, before_text=old, after_text=new))
        elif not old:
            diff.append(DiffLine(kind='add', after_line=lineno, after_text=new))
        elif not new:
            diff.append(DiffLine(kind='remove', before_line=lineno, before_text=old))
        else:
            diff.append(DiffLine(kind='change', before_line=lineno, after_line=lineno, before_text=old, after_text=new))
    return diff


def format_diff(diff: list[DiffLine]) -> str:
    """Render a diff as ``+``/``-``/``~`` prefixed lines for plain-text output."""
    rows = []
    for line in diff:
        if line.kind == 'change':
            rows.append(f'- {line.before_text}')
            rows.append(f'+ {line.after_text}')
        else:
            rows.append(f'{line.marker} {line.text}')
    return '\n'.join(rows)
