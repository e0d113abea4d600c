"""Read-side access to the active log file.

The reader takes no lock: it may see a file in the middle of a rotation (the
renamed backup's content is gone from the active path, or the fresh file is
still empty).  Retrieval is a diagnostics path, so that is acceptable.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterator, List

from .records import LogEntry, parse_line
from .severity import Severity

__all__ = ["LogReader"]

_log = logging.getLogger(__name__)


class LogReader:
    """Filtered retrieval of records from one log file."""

    def __init__(self, path: str | os.PathLike[str] = "app.log") -> None:
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def read_all(self) -> List[str]:
        """Return every line of the file in order, without line terminators.

        A missing file is a valid, empty log: ``[]`` is returned and an INFO
        notice emitted.
        """
        try:
            with self.path.open("r", encoding="utf-8", errors="replace") as fh:
                return [line.rstrip("\r\n") for line in fh]
        except FileNotFoundError:
            _log.info("Log file not found: %s", self.path)
            return []
        except OSError as exc:
            _log.error("Could not read log file %s: %s", self.path, exc)
            return []

    def read_filtered(self, severity: Severity | int | str | None = None) -> List[str]:
        """Return lines whose severity tag equals *severity* (all lines for ``None``)."""
        if severity is None:
            return self.read_all()
        try:
            wanted = Severity.parse(severity)
        except ValueError as exc:
            _log.error("Cannot filter by severity: %s", exc)
            return []
        matches: List[str] = []
        for line in self.read_all():
            entry = parse_line(line)
            if entry is not None and entry.severity is wanted:
                matches.append(line)
        return matches

    def read_by_time(self, start: datetime, end: datetime) -> List[str]:
        """Return lines stamped within ``[start, end]`` (inclusive), in file order.

        Lines whose timestamp cannot be parsed are skipped.  Timezone-aware
        bounds are converted to local wall-clock time, which is what the sink
        writes.
        """
        start, end = _local_naive(start), _local_naive(end)
        matches: List[str] = []
        for line in self.read_all():
            entry = parse_line(line)
            if entry is None:
                continue
            if start <= entry.timestamp <= end:
                matches.append(line)
        return matches

    def entries(self) -> Iterator[LogEntry]:
        """Yield parsed records, skipping malformed lines."""
        for line in self.read_all():
            entry = parse_line(line)
            if entry is not None:
                yield entry

    def __repr__(self) -> str:  # pragma: no cover
        return f"<LogReader path={self.path!s}>"


def _local_naive(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)
