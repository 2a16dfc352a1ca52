"""Launching the user's editor on a temporary copy of template content."""

from __future__ import annotations

import os
import platform
import subprocess  # noqa: S404 -- used for launching $EDITOR, not shell commands
import sys
import tempfile
from pathlib import Path


def resolve_editor() -> list[str] | None:
    """Resolve the user's preferred editor command as an argv list.

    Priority: $VISUAL → $EDITOR → platform fallback (open -t / xdg-open / notepad).
    """
    for var in ('VISUAL', 'EDITOR'):
        value = os.environ.get(var, '').strip()
        if value:
            return value.split()
    fallbacks = {
        'darwin': ['open', '-W', '-t'],
        'linux': ['xdg-open'],
        'win32': ['notepad'],
    }
    plat = sys.platform if sys.platform in fallbacks else platform.system().lower()
    return fallbacks.get(plat)


def edit_text(editor_argv: list[str], text: str) -> str:
    """Write *text* to a temp file, run the editor on it, and return the edited contents."""
    with tempfile.NamedTemporaryFile('w', suffix='.md', delete=False, encoding='utf-8') as f:
        f.write(text)
        path = Path(f.name)
    try:
        subprocess.run([*editor_argv, str(path)], check=False)  # noqa: S603 -- argv built from env/platform
        return path.read_text(encoding='utf-8')
    finally:
        path.unlink(missing_ok=True)
