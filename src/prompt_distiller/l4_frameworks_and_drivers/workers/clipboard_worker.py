"""Thin thread worker that polls the clipboard and reports new text."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

from prompt_distiller.l1_entities.errors import ClipboardUnavailableError
from prompt_distiller.l2_use_cases.ports.clipboard import Clipboard
from prompt_distiller.l2_use_cases.utils.sensitive_filter import contains_ignored_keyword

log = logging.getLogger('pd.clipboard')

DEFAULT_POLL_INTERVAL = 0.5


class ClipboardWatcher:
    """Polls *clipboard* on a daemon thread and calls *on_text* with each new, non-ignored text.

    The clipboard contents at start() are taken as the baseline and not
    reported. start() and stop() are idempotent. *on_text* runs on the watcher
    thread; it must hand off to the UI thread itself.
    """

    def __init__(
        self,
        clipboard: Clipboard,
        on_text: Callable[[str], None],
        ignore_keywords: Iterable[str] = (),
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._clipboard = clipboard
        self._on_text = on_text
        self.ignore_keywords: list[str] = list(ignore_keywords)
        self._interval = interval
        self._last_text = ''
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._last_text = self._read() or ''
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name='clipboard-watcher', daemon=True)
        self._thread.start()
        log.info('Clipboard watcher started (interval=%.2fs)', self._interval)

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=self._interval * 4)
        self._thread = None
        log.info('Clipboard watcher stopped')

    def toggle(self) -> bool:
        """Flip between running and stopped. Returns the new running state."""
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    def poll_once(self) -> str | None:
        """Check the clipboard once. Returns the reported text, or None if nothing was reported."""
        current = self._read()
        if not current or current == self._last_text:
            return None
        self._last_text = current
        if contains_ignored_keyword(current, self.ignore_keywords):
            log.info('Clipboard text ignored (matched an ignore keyword)')
            return None
        self._on_text(current)
        return current

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.poll_once()
            except Exception:  # noqa: BLE001 -- a failing consumer must not kill the poll loop
                log.error('Clipboard watcher callback failed', exc_info=True)

    def _read(self) -> str | None:
        try:
            return self._clipboard.read()
        except ClipboardUnavailableError as e:
            log.warning('Clipboard read failed: %s', e)
            return None
