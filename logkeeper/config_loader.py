"""Plain-text ``key=value`` configuration for the log sink.

Recognised keys::

    level=WARNING          # INFO | WARNING | ERROR
    logfile=logs/app.log   # active log file
    maxsize=512            # rotation threshold in KiB

A ``#`` preceded by whitespace starts a trailing comment; whole-line
comments and blank lines are skipped.

Loading is *total*: whatever is on disk, :meth:`ConfigLoader.load` returns a
usable :class:`SinkConfig`.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Final

from .errors import ConfigLoadError
from .severity import Severity

__all__ = [
    "ConfigLoader",
    "SinkConfig",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_FILE",
]

CONFIG_ENV_VAR: Final[str] = "LOGKEEPER_CONFIG"
DEFAULT_CONFIG_FILE: Final[str] = "logger_config.txt"

_log = logging.getLogger(__name__)

_COMMENT_REGEX: Final[re.Pattern[str]] = re.compile(r"\s+#")


@dataclass(frozen=True, slots=True)
class SinkConfig:
    """Settings the sink is initialised with."""

    min_severity: Severity = Severity.INFO
    log_path: Path = field(default_factory=lambda: Path("app.log"))
    max_bytes: int = 1024 * 1024  # 1 MiB


class ConfigLoader:
    """Reader for the optional sink configuration file.

    The path is taken from the constructor argument, then the
    ``LOGKEEPER_CONFIG`` environment variable, then ``logger_config.txt`` in
    the current working directory.
    """

    #: Default configuration values, also used whenever the file is unusable.
    DEFAULTS: Dict[str, Any] = {
        "level": Severity.INFO,
        "logfile": "app.log",
        "maxsize_kib": 1024,
    }

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path: Path = self._resolve_config_path(path)

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    @classmethod
    def defaults(cls) -> SinkConfig:
        """Return the built-in configuration ``{INFO, app.log, 1 MiB}``."""
        return SinkConfig(
            min_severity=cls.DEFAULTS["level"],
            log_path=Path(cls.DEFAULTS["logfile"]),
            max_bytes=cls.DEFAULTS["maxsize_kib"] * 1024,
        )

    def load(self) -> SinkConfig:
        """Load the config file, falling back to :meth:`defaults` on any problem."""
        if not self.path.is_file():
            _log.warning("No config file at %s – using defaults", self.path)
            return self.defaults()
        try:
            config = self._parse()
        except ConfigLoadError as exc:
            _log.warning("Failed to load config – using defaults: %s", exc)
            return self.defaults()
        _log.info(
            "Config loaded from %s: level=%s, logfile=%s, maxsize=%d bytes",
            self.path,
            config.min_severity.name,
            config.log_path,
            config.max_bytes,
        )
        return config

    # ------------------------------------------------------------------
    # Implementation details
    # ------------------------------------------------------------------
    @staticmethod
    def _resolve_config_path(path: str | os.PathLike[str] | None) -> Path:
        if path is not None:
            return Path(path)
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)
        return Path(DEFAULT_CONFIG_FILE)

    def _parse(self) -> SinkConfig:
        """Parse the file strictly, raising :class:`ConfigLoadError` on any defect."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigLoadError(self.path, f"unreadable: {exc}") from exc

        values: Dict[str, Any] = dict(self.DEFAULTS)
        for line_no, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if not sep:
                raise ConfigLoadError(self.path, f"expected key=value, got {line!r}", line_no)
            key, value = key.strip(), _COMMENT_REGEX.split(value, maxsplit=1)[0].strip()

            if key == "level":
                try:
                    values["level"] = Severity.parse(value)
                except ValueError as exc:
                    raise ConfigLoadError(self.path, str(exc), line_no) from exc
            elif key == "logfile":
                if not value:
                    raise ConfigLoadError(self.path, "empty logfile", line_no)
                values["logfile"] = value
            elif key == "maxsize":
                try:
                    size_kib = int(value)
                except ValueError as exc:
                    raise ConfigLoadError(self.path, f"maxsize is not an integer: {value!r}", line_no) from exc
                if size_kib <= 0:
                    raise ConfigLoadError(self.path, f"maxsize must be positive: {size_kib}", line_no)
                values["maxsize_kib"] = size_kib
            # Unknown keys are ignored

        return SinkConfig(
            min_severity=values["level"],
            log_path=Path(values["logfile"]),
            max_bytes=values["maxsize_kib"] * 1024,
        )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ConfigLoader path={self.path!s}>"
