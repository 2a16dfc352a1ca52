"""Gateway: system clipboard via pyperclip — implements Clipboard port."""

from __future__ import annotations

import pyperclip

from prompt_distiller.l1_entities.errors import ClipboardUnavailableError


class PyperclipClipboard:
    def read(self) -> str:
        try:
            return pyperclip.paste() or ''
        except pyperclip.PyperclipException as e:
            raise ClipboardUnavailableError(str(e)) from e

    def write(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardUnavailableError(str(e)) from e
