"""Append-only log store with size-based, index-numbered rotation.

Responsibilities
----------------
1. Append formatted records to the *active* file, creating it (and its parent
   directory) when absent and re-creating it if it disappears underneath us.
2. Rename the active file to ``<stem>_<n>.log`` once it grows beyond the
   configured threshold.  ``n`` starts at 1 and only ever increases; backups
   are never overwritten nor deleted.
3. Report append failures through the diagnostics logger instead of raising.

The handler does **not** decide *when* to rotate on its own – the sink calls
:meth:`IndexedFileHandler.should_rotate` / :meth:`IndexedFileHandler.rotate`
inside its critical section so rotation and the following append are atomic.
"""
from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass
from logging.handlers import WatchedFileHandler
from pathlib import Path
from typing import List, Tuple

from .errors import RotationError, WriteError

__all__ = [
    "IndexedFileHandler",
    "RotationState",
    "rotated_files",
]

_log = logging.getLogger(__name__)


def _backup_name(stem: str, index: int) -> str:
    return f"{stem}_{index}.log"


@dataclass(slots=True)
class RotationState:
    """Active file path plus the index the next backup will receive."""

    active_path: Path
    next_index: int = 1

    def backup_path(self, index: int) -> Path:
        return self.active_path.with_name(_backup_name(self.active_path.stem, index))

    def next_free_backup(self) -> Tuple[int, Path]:
        """Return the first ``(index, path)`` at or after *next_index* not yet on disk."""
        index = self.next_index
        candidate = self.backup_path(index)
        # Backups left behind by an earlier process are skipped, never replaced
        while candidate.exists():
            index += 1
            candidate = self.backup_path(index)
        return index, candidate

    def commit(self, index: int) -> None:
        """Record that backup *index* has been used."""
        self.next_index = index + 1


class IndexedFileHandler(WatchedFileHandler):
    """File handler owning the active log file and its rotation state."""

    def __init__(self, filename: str | os.PathLike[str], *, max_bytes: int, encoding: str = "utf-8") -> None:
        super().__init__(filename, mode="a", encoding=encoding, delay=True)
        self.max_bytes = max_bytes
        self.rotation = RotationState(active_path=Path(self.baseFilename))

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------
    def should_rotate(self) -> bool:
        """Return *True* when the active file exists and exceeds *max_bytes*."""
        try:
            return os.path.getsize(self.baseFilename) > self.max_bytes
        except OSError:
            return False

    def rotate(self) -> Path:
        """Rename the active file to its next indexed backup and return the backup path.

        The stream is closed first; the next :meth:`emit` opens a fresh active
        file.  When the rename fails the original file stays active.

        Raises
        ------
        RotationError
            If the active file could not be renamed.
        """
        self.acquire()
        try:
            if self.stream is not None:
                self.stream.flush()
                self.stream.close()
                self.stream = None

            source = self.rotation.active_path
            index, target = self.rotation.next_free_backup()
            try:
                os.rename(source, target)
            except OSError as exc:
                raise RotationError(source, target, exc) from exc
            self.rotation.commit(index)
            return target
        finally:
            self.release()

    # ------------------------------------------------------------------
    # logging.Handler overrides
    # ------------------------------------------------------------------
    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()

    def emit(self, record: logging.LogRecord) -> None:
        # Opening the file happens outside FileHandler's own error guard
        try:
            super().emit(record)
        except Exception:  # noqa: BLE001 – a failed append must never reach the caller
            self.handleError(record)

    def handleError(self, record: logging.LogRecord) -> None:  # noqa: N802 – stdlib name
        error = WriteError(Path(self.baseFilename), sys.exc_info()[1])
        _log.error("%s", error)


def rotated_files(active_path: str | os.PathLike[str]) -> List[Path]:
    """Return the existing backups of *active_path*, ordered by rotation index."""
    active = Path(active_path)
    pattern = re.compile(rf"^{re.escape(active.stem)}_(\d+)\.log$")
    found: List[Tuple[int, Path]] = []
    if not active.parent.is_dir():
        return []
    for entry in active.parent.iterdir():
        if not entry.is_file():
            continue
        match = pattern.match(entry.name)
        if match:
            found.append((int(match.group(1)), entry))
    return [path for _, path in sorted(found)]
