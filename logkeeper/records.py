"""On-disk record format shared by the sink (write side) and the reader.

A record occupies exactly one line::

    [2025-01-31 14:02:17] [worker-2] [WARNING] disk almost full

The four bracketed/space separated fields are *timestamp*, *origin* (the
thread name), *severity* tag and free-form *message*.  The reader locates the
fields by their delimiters, so origins of any length are supported.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Final

from .severity import Severity

__all__ = [
    "DATE_FORMAT",
    "LINE_FORMAT",
    "CONSOLE_PREFIX",
    "LogEntry",
    "RecordFormatter",
    "parse_line",
]

DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
LINE_FORMAT: Final[str] = "[%(asctime)s] [%(threadName)s] [%(levelname)s] %(message)s"
CONSOLE_PREFIX: Final[str] = "[CONSOLE] "

_LINE_REGEX: Final[re.Pattern[str]] = re.compile(
    r"^\[(?P<timestamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\] "
    r"\[(?P<origin>.*?)\] "
    r"\[(?P<severity>INFO|WARNING|ERROR)\] "
    r"(?P<message>.*)$"
)


class RecordFormatter(logging.Formatter):
    """:class:`logging.Formatter` producing the one-line record layout.

    Line breaks inside a message are escaped so that one record can never
    span several lines of the store.
    """

    def __init__(self, prefix: str = "") -> None:
        super().__init__(fmt=LINE_FORMAT, datefmt=DATE_FORMAT)
        self._prefix = prefix

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        return self._prefix + line.replace("\r", "\\r").replace("\n", "\\n")


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A record read back from the store."""

    timestamp: datetime
    origin: str
    severity: Severity
    message: str

    def format_line(self) -> str:
        """Render the entry in the on-disk layout (without trailing newline)."""
        return (
            f"[{self.timestamp.strftime(DATE_FORMAT)}] [{self.origin}] "
            f"{self.severity.tag} {self.message}"
        )


def parse_line(line: str) -> LogEntry | None:
    """Parse *line* into a :class:`LogEntry` or return ``None`` if malformed."""
    match = _LINE_REGEX.match(line.rstrip("\r\n"))
    if match is None:
        return None
    try:
        timestamp = datetime.strptime(match.group("timestamp"), DATE_FORMAT)
    except ValueError:
        # Digits in the right places but not a real date (e.g. month 13)
        return None
    return LogEntry(
        timestamp=timestamp,
        origin=match.group("origin"),
        severity=Severity[match.group("severity")],
        message=match.group("message"),
    )
