"""Log Keeper – thread-safe leveled logging with indexed rotation.

Exposes commonly used helpers at the package root for convenience.
"""

from .config_loader import ConfigLoader, SinkConfig  # noqa: F401
from .errors import ConfigLoadError, LogKeeperError, RotationError, WriteError  # noqa: F401
from .logging_config import setup_logging  # noqa: F401
from .reader import LogReader  # noqa: F401
from .records import LogEntry, parse_line  # noqa: F401
from .severity import Severity  # noqa: F401
from .sink import LogSink, get_sink  # noqa: F401
from .store import rotated_files  # noqa: F401

__version__ = "1.0.0"
