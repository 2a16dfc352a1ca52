"""Domain error types."""


class CorruptStoreError(Exception):
    """Raised when a persisted file exists but cannot be parsed or validated."""


class ClipboardUnavailableError(Exception):
    """Raised when the system clipboard cannot be read or written."""
