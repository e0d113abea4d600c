"""Error taxonomy of the logging subsystem.

Every error defined here is *recoverable*: it is raised close to the failing
I/O call and caught again at the subsystem boundary, where it is reported
through the diagnostics logger.  None of them ever reaches code that calls
into :class:`~logkeeper.sink.LogSink`.
"""
from __future__ import annotations

from pathlib import Path

__all__ = [
    "LogKeeperError",
    "ConfigLoadError",
    "RotationError",
    "WriteError",
]


class LogKeeperError(Exception):
    """Base-class for all errors raised inside *logkeeper*."""


class ConfigLoadError(LogKeeperError):
    """The config file exists but could not be read or parsed."""

    def __init__(self, path: Path, reason: str, line_no: int | None = None):
        self.path = path
        self.reason = reason
        self.line_no = line_no
        where = f"{path}:{line_no}" if line_no is not None else str(path)
        super().__init__(f"{where}: {reason}")


class RotationError(LogKeeperError):
    """Renaming the active file to its indexed backup failed."""

    def __init__(self, source: Path, target: Path, cause: OSError):
        self.source = source
        self.target = target
        self.cause = cause
        super().__init__(f"Could not rotate {source} -> {target}: {cause}")


class WriteError(LogKeeperError):
    """Appending a record to the active file failed."""

    def __init__(self, path: Path, cause: BaseException | None):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write log record to {path}: {cause}")
