"""File-based debug logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from prompt_distiller.l3_interface_adapters.gateways.paths import LOG_FILENAME


def setup_file_logging(log_dir: Path) -> Path:
    """Configure file-based debug logging into *log_dir*. Returns the log file path."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME
    root = logging.getLogger('pd')
    if any(isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path.absolute() for h in root.handlers):
        return log_path
    handler = logging.FileHandler(log_path, encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)
    logging.getLogger('pd.app').info('Debug logging started → %s', log_path)
    return log_path
