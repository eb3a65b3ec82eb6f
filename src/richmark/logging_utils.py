#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/logging_utils.py
"""Logging setup for richmark.

Every module logs through ``logging.getLogger(__name__)`` below the
``richmark`` package logger. The conversion stages (parser, import and export
traversals, renderer, config loading) only log at DEBUG, and ``debug_timer``
reports how long each markdown boundary call took.

``configure_logging`` attaches its handlers to the package logger rather than
the root logger, so an application embedding richmark keeps its own logging
setup. Calling it again replaces the handlers it installed before.

"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "richmark"

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s.%(msecs)03d] [%(levelname)s] [%(stage)s] %(message)s"
TRACE_DATE_FORMAT = "%H:%M:%S"


class StageFilter(logging.Filter):
    """Tag each record with the richmark stage that emitted it.

    The stage is the logger name below the package, e.g. ``conversion.importer``
    for records from ``richmark.conversion.importer``.

    """

    def filter(self, record: logging.LogRecord) -> bool:
        prefix = PACKAGE_LOGGER + "."
        record.stage = record.name[len(prefix) :] if record.name.startswith(prefix) else record.name
        return True


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure the handlers of the ``richmark`` logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g. "DEBUG")
    log_file : str, optional
        Also append log records to this file
    trace_mode : bool, default False
        Prefix records with a millisecond timestamp and their stage

    Returns
    -------
    logging.Logger
        The configured package logger

    Raises
    ------
    ValueError
        If ``log_level`` is not a known level name
    OSError
        If ``log_file`` cannot be opened

    """
    resolved_level = _resolve_level(log_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolved_level)
    for handler in list(package_logger.handlers):
        if getattr(handler, "richmark_handler", False):
            package_logger.removeHandler(handler)
            handler.close()

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    for handler in handlers:
        handler.richmark_handler = True  # type: ignore[attr-defined]
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        handler.addFilter(StageFilter())
        package_logger.addHandler(handler)

    if log_file:
        package_logger.debug(f"Logging to file: {log_file}")
    return package_logger
