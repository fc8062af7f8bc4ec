"""Logging setup for the rfcxml command-line interface.

Library modules only create loggers with ``logging.getLogger(__name__)``;
handlers are attached here, and only by the CLI. Renderer fallbacks
(conflicting citation kinds, backward matter switches, repeated title
blocks) are reported at WARNING level, so that is the default.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "rfcxml"


def resolve_log_level(log_level: int | str, trace_mode: bool = False) -> int:
    """Turn a level name or number into a numeric level; trace mode forces DEBUG."""
    if trace_mode:
        return logging.DEBUG
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.WARNING)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure handlers on the ``rfcxml`` package logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Optional path to a log file for teeing log output.
    trace_mode : bool, default False
        When true, log at DEBUG with timestamps and logger names.

    Returns
    -------
    logging.Logger
        The configured package logger.

    """
    resolved_level = resolve_log_level(log_level, trace_mode)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolved_level)
    package_logger.handlers.clear()
    package_logger.propagate = False

    if trace_mode:
        formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", "%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            package_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
            package_logger.debug("Logging to file: %s", log_file)

    return package_logger


__all__ = ["configure_logging", "resolve_log_level"]
