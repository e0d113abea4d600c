"""Process-wide log sink.

The :class:`LogSink` is the single point through which records enter the
store.  Each accepted record is

1. gated against the current minimum :class:`~logkeeper.severity.Severity`,
2. preceded by a rotation of the active file when it has grown too large,
3. appended to the active file, and
4. echoed to the console (stderr for ERROR, stdout otherwise).

Steps 2–4 run inside one per-sink :class:`threading.Lock`, so concurrent
callers never observe a half-rotated store or interleaved lines.

Most code should use the shared instance::

    from logkeeper import LogSink

    LogSink.get_instance().log_warning("cache miss storm")

Tests and embedding applications may construct their own ``LogSink(config)``
and pass it around instead.
"""
from __future__ import annotations

import logging
import os
import sys
import threading
from dataclasses import replace
from typing import ClassVar

from .config_loader import ConfigLoader, SinkConfig
from .errors import RotationError
from .reader import LogReader
from .records import CONSOLE_PREFIX, RecordFormatter
from .severity import Severity
from .store import IndexedFileHandler, RotationState

__all__ = [
    "ConsoleMirrorHandler",
    "LogSink",
    "get_sink",
]

_log = logging.getLogger(__name__)

_RECORD_LOGGER_NAME = "logkeeper.records"


class ConsoleMirrorHandler(logging.StreamHandler):
    """Echo records to ``sys.stdout``, or ``sys.stderr`` for ERROR.

    The stream is looked up on every record and released right after, so
    redirected or captured standard streams are honoured and a redirect that
    has since been closed is never touched again.
    """

    def __init__(self) -> None:
        super().__init__(sys.stdout)
        self.stream = None
        self.setFormatter(RecordFormatter(prefix=CONSOLE_PREFIX))

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr if record.levelno >= Severity.ERROR else sys.stdout
        try:
            super().emit(record)
        finally:
            self.stream = None

    def flush(self) -> None:
        self.acquire()
        try:
            for stream in (sys.stdout, sys.stderr):
                try:
                    if stream is not None:
                        stream.flush()
                except (OSError, ValueError):
                    # Closed or broken standard stream; nothing left to flush
                    pass
        finally:
            self.release()


class LogSink:  # pylint: disable=too-many-instance-attributes
    """Leveled, rotating, thread-safe log sink."""

    _instance: ClassVar["LogSink | None"] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    def __init__(self, config: SinkConfig | None = None) -> None:
        self._config: SinkConfig = config if config is not None else ConfigLoader.defaults()
        self._lock = threading.Lock()
        self._closed = False

        self._store = IndexedFileHandler(self._config.log_path, max_bytes=self._config.max_bytes)
        self._store.setFormatter(RecordFormatter())
        self._console = ConsoleMirrorHandler()

        # Private, unregistered logger: gating happens in the sink, so it
        # stays at NOTSET and never propagates into the host's logging tree.
        self._logger = logging.Logger(_RECORD_LOGGER_NAME)
        self._logger.propagate = False
        self._logger.addHandler(self._store)
        self._logger.addHandler(self._console)

        _log.debug(
            "Sink ready: level=%s, file=%s, max_bytes=%d",
            self._config.min_severity.name,
            self._store.baseFilename,
            self._config.max_bytes,
        )

    @classmethod
    def get_instance(cls, config_path: str | os.PathLike[str] | None = None) -> "LogSink":
        """Return the shared sink, building it from the config file on first use.

        *config_path* only matters for the call that performs construction.
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls(ConfigLoader(config_path).load())
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Close and forget the shared sink (primarily for tests / shutdown)."""
        with cls._instance_lock:
            try:
                if cls._instance is not None:
                    cls._instance.close()
            finally:
                cls._instance = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def config(self) -> SinkConfig:
        return self._config

    @property
    def rotation(self) -> RotationState:
        return self._store.rotation

    def set_level(self, severity: Severity | int | str) -> None:  # noqa: D401 – imperative API
        """Change the minimum severity and record the change as INFO."""
        try:
            level = Severity.parse(severity)
        except ValueError as exc:
            _log.error("Ignoring invalid log level: %s", exc)
            return
        with self._lock:
            self._config = replace(self._config, min_severity=level)
            self._log_locked(f"Log level changed to {level.name}", Severity.INFO)

    def log(self, message: str, severity: Severity | int | str = Severity.INFO) -> None:
        """Write *message* at *severity* if it passes the current minimum."""
        try:
            level = Severity.parse(severity)
        except ValueError as exc:
            _log.error("Dropping record with invalid severity: %s", exc)
            return
        with self._lock:
            self._log_locked(str(message), level)

    def log_info(self, message: str) -> None:
        self.log(message, Severity.INFO)

    def log_warning(self, message: str) -> None:
        self.log(message, Severity.WARNING)

    def log_error(self, message: str) -> None:
        self.log(message, Severity.ERROR)

    def reader(self) -> LogReader:
        """Return a :class:`LogReader` bound to this sink's active file."""
        return LogReader(self._config.log_path)

    def close(self) -> None:
        """Flush and release the file handle; the console streams stay open.

        A closed sink writes nothing: later records are dropped and each drop
        is reported as a WARNING through the diagnostics logger.
        """
        with self._lock:
            self._closed = True
            for handler in list(self._logger.handlers):
                try:
                    handler.flush()
                    handler.close()
                except Exception as exc:  # noqa: BLE001 – shutdown must not raise into the caller
                    _log.error("Failed to close %s: %s", type(handler).__name__, exc)
                finally:
                    self._logger.removeHandler(handler)

    # ------------------------------------------------------------------
    # Internal helpers – caller must hold self._lock
    # ------------------------------------------------------------------
    def _accepts(self, level: Severity) -> bool:
        return level >= self._config.min_severity

    def _log_locked(self, message: str, level: Severity) -> None:
        if not self._accepts(level):
            return
        if self._closed:
            _log.warning("Sink for %s is closed – dropping record: %s", self._store.baseFilename, message)
            return
        self._rotate_if_needed()
        self._logger.log(level, message)

    def _rotate_if_needed(self) -> None:
        if not self._store.should_rotate():
            return
        try:
            backup = self._store.rotate()
        except RotationError as exc:
            _log.error("%s – continuing with the current file", exc)
            return
        if self._accepts(Severity.INFO):
            self._logger.log(Severity.INFO, f"Log file rotated to {backup.name}")

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<LogSink file={self._store.baseFilename!s} level={self._config.min_severity.name} "
            f"next_backup={self.rotation.next_index}>"
        )


def get_sink(config_path: str | os.PathLike[str] | None = None) -> LogSink:
    """Shortcut for :meth:`LogSink.get_instance`."""
    return LogSink.get_instance(config_path)
