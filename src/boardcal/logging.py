from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .core import LOG_FILE, ensure_data_dir

# Transport libraries pulled in by supabase and hypercorn; they log every request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "hpack", "hypercorn.access")

_configured_path: Optional[Path] = None


def configure_logging(level: str = "INFO", *, log_path: Optional[Path] = None) -> Path:
    """Attach rotating file and console handlers to the root logger once per process.

    Returns the file being written to. Later calls are no-ops and return the same path.
    """

    global _configured_path
    if _configured_path is not None:
        return _configured_path

    log_file = log_path or LOG_FILE
    ensure_data_dir(log_file.parent)
    resolved = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler = RotatingFileHandler(str(log_file), maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    file_handler.setFormatter(formatter)
    # stderr keeps CLI JSON on stdout clean.
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(resolved)
    root.addHandler(file_handler)
    root.addHandler(console_handler)
    if resolved > logging.DEBUG:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    _configured_path = log_file
    logging.getLogger(__name__).debug("Logging configured. Output file: %s", log_file)
    return log_file


__all__ = ["configure_logging"]
