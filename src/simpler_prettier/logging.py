"""Logging for simpler-prettier.

Everything logs under the ``simpler_prettier`` logger through per-module
children (``get_logger("session")``). Two extra levels sit around the stock
ones: VERBOSE for the command lines being spawned and TRACE for per-poll
watcher activity.

Output goes to the file named by ``logging.file`` (or SIMPLER_PRETTIER_LOG),
otherwise to stderr when it is a terminal. Each line carries the short module
name, e.g. ``12:00:01 info formatter: Formatting project /work``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simpler_prettier.config.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

ROOT_NAME = "simpler_prettier"
LOG_FILE_ENV = "SIMPLER_PRETTIER_LOG"

logger = logging.getLogger(ROOT_NAME)

_handlers: list[logging.Handler] = []

_NAMED_LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Index is the verbosity count; -q maps to 0, each -v adds one on top of 2
_VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)


class _ModuleFormatter(logging.Formatter):
    """Lowercase level names and drop the package prefix from logger names."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        record.module_name = record.name.removeprefix(ROOT_NAME).lstrip(".") or "main"
        return super().format(record)


def resolve_level(config: LoggingConfig | None) -> int:
    """Effective level; a verbosity count wins over a level name."""
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        index = min(max(config.verbose, 0), len(_VERBOSITY_LEVELS) - 1)
        return _VERBOSITY_LEVELS[index]
    if config.level:
        return _NAMED_LEVELS.get(config.level.upper(), logging.INFO)
    return logging.INFO


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Attach handlers once; later calls are no-ops until reset_logging()."""
    if _handlers:
        return

    level = resolve_level(config)
    logger.setLevel(level)
    formatter = _ModuleFormatter(
        "%(asctime)s %(levelname)s %(module_name)s: %(message)s", datefmt="%H:%M:%S"
    )

    log_path = (config.file if config else None) or os.environ.get(LOG_FILE_ENV)
    handler: logging.Handler | None = None
    if log_path:
        try:
            handler = logging.FileHandler(os.path.expanduser(log_path), encoding="utf-8")
        except OSError as e:
            print(f"[simpler-prettier] Cannot open log file {log_path}: {e}", file=sys.stderr)
            handler = logging.StreamHandler(sys.stderr)
    elif sys.stderr.isatty():
        handler = logging.StreamHandler(sys.stderr)

    if handler is None:
        handler = logging.NullHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    _handlers.append(handler)


def reset_logging() -> None:
    """Detach and close the handlers added by setup_logging()."""
    while _handlers:
        handler = _handlers.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def get_logger(name: str | None = None) -> logging.Logger:
    """The package logger, or its child for one module."""
    if name:
        return logger.getChild(name)
    return logger
