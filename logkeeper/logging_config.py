"""Diagnostics logging configuration.

*logkeeper* reports its own trouble (unreadable config, failed rotation,
failed append, missing log file) through ordinary stdlib loggers named after
each module.  This module offers an opt-in helper that attaches a console
handler to the ``logkeeper`` package logger:

    • StreamHandler → stderr (by default) for operator visibility

Library code never calls :func:`setup_logging` on its own; without it the
stdlib *last resort* handler still prints WARNING and above to stderr.
Subsequent calls are no-ops thanks to an idempotent guard.

Failure reports are ordinary log records, not direct writes to stderr.
They follow whatever the host has configured for the ``logkeeper`` tree.
A host that attaches its own handlers, raises the level above ERROR or
disables propagation decides where (and whether) they appear.
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

__all__ = ["setup_logging", "reset_logging", "PACKAGE_LOGGER"]

PACKAGE_LOGGER = "logkeeper"

# Prevent double configuration if called multiple times
_CONFIGURED: bool = False
_HANDLER: logging.Handler | None = None


def setup_logging(
    *,
    level: int | str = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``logkeeper`` package logger with a console handler.

    Call this to pin write, rotation and config failures to the error stream
    regardless of how the host application routes its other loggers.

    Parameters
    ----------
    level: int | str
        Minimum level of diagnostics that get printed.
    stream: TextIO | None
        Destination stream.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """

    global _CONFIGURED, _HANDLER  # noqa: PLW0603 – module-level singleton guard

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _CONFIGURED:
        return logger  # already done – silently ignore subsequent calls

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    _HANDLER = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _HANDLER.setFormatter(formatter)

    logger.setLevel(level)
    logger.addHandler(_HANDLER)

    _CONFIGURED = True
    return logger


def reset_logging() -> None:
    """Detach the handler installed by :func:`setup_logging` (primarily for tests)."""
    global _CONFIGURED, _HANDLER  # noqa: PLW0603

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)
        _HANDLER.close()
    logger.setLevel(logging.NOTSET)
    _HANDLER = None
    _CONFIGURED = False
