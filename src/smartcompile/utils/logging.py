"""Logging configuration for the workbench.

One rotating log file under ``~/.smartcompile/logs`` plus an optional
console stream. ``SMARTCOMPILE_LOG_DIR`` relocates the file.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["setup_logging", "get_log_path", "reset_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "smartcompile.log"

_DEFAULT_LOG_DIR = Path.home() / ".smartcompile" / "logs"
_NOISY_LOGGERS: tuple[str, ...] = ("asyncio", "qasync", "httpx", "httpcore")
_LOG_PATH: Path | None = None


def setup_logging(
    debug: bool = False,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """Install the workbench handlers on the root logger and return the log path.

    Repeated calls are no-ops unless ``force`` is set, which is how the
    bootstrap switches to DEBUG after settings turn on ``debug_logging``.
    """

    global _LOG_PATH
    if _LOG_PATH is not None and not force:
        return _LOG_PATH

    level = logging.DEBUG if debug else logging.INFO
    directory = Path(log_dir or os.environ.get("SMARTCOMPILE_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILE_NAME

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)

    # Third-party transport chatter stays at WARNING even in debug mode.
    quiet_level = max(level, logging.WARNING)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    _LOG_PATH = log_path
    logging.getLogger(__name__).debug("Logging configured at %s -> %s", logging.getLevelName(level), log_path)
    return log_path


def get_log_path() -> Path | None:
    """Return the active log file, or ``None`` before :func:`setup_logging` ran."""

    return _LOG_PATH


def reset_logging() -> None:
    """Detach and close the handlers installed by :func:`setup_logging`."""

    global _LOG_PATH
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    _LOG_PATH = None
