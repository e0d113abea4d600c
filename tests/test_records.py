import logging
from datetime import datetime

import pytest

from logkeeper.records import CONSOLE_PREFIX, LogEntry, RecordFormatter, parse_line
from logkeeper.severity import Severity


def _record(message: str, level: int = logging.INFO, thread: str = "worker-1") -> logging.LogRecord:
    record = logging.LogRecord("test", level, __file__, 1, message, None, None)
    record.created = datetime(2025, 3, 4, 5, 6, 7).timestamp()
    record.threadName = thread
    return record


# -----------------------------------------------------------------------------
# Severity
# -----------------------------------------------------------------------------

def test_severity_total_order():
    assert Severity.INFO < Severity.WARNING < Severity.ERROR
    assert sorted([Severity.ERROR, Severity.INFO, Severity.WARNING]) == list(Severity)


@pytest.mark.parametrize("value", ["error", " ERROR ", Severity.ERROR, logging.ERROR])
def test_severity_parse_accepts_names_members_and_levels(value):
    assert Severity.parse(value) is Severity.ERROR


@pytest.mark.parametrize("value", ["DEBUG", "", 10, None, True])
def test_severity_parse_rejects_unknown(value):
    with pytest.raises(ValueError):
        Severity.parse(value)


# -----------------------------------------------------------------------------
# Formatting / parsing
# -----------------------------------------------------------------------------

def test_formatter_produces_bracketed_layout():
    line = RecordFormatter().format(_record("disk almost full", logging.WARNING))
    assert line == "[2025-03-04 05:06:07] [worker-1] [WARNING] disk almost full"


def test_console_formatter_is_prefixed():
    line = RecordFormatter(prefix=CONSOLE_PREFIX).format(_record("hi"))
    assert line.startswith("[CONSOLE] [2025-03-04 05:06:07] ")


def test_formatter_keeps_records_on_one_line():
    line = RecordFormatter().format(_record("first\nsecond\r\nthird"))
    assert "\n" not in line and "\r" not in line
    assert line.endswith("first\\nsecond\\r\\nthird")


def test_parse_line_handles_long_origins_and_bracketed_messages():
    line = "[2025-03-04 05:06:07] [ThreadPoolExecutor-0_12] [ERROR] payload [ERROR] inside\n"
    entry = parse_line(line)
    assert entry == LogEntry(
        timestamp=datetime(2025, 3, 4, 5, 6, 7),
        origin="ThreadPoolExecutor-0_12",
        severity=Severity.ERROR,
        message="payload [ERROR] inside",
    )
    assert entry.format_line() == line.rstrip("\n")


@pytest.mark.parametrize(
    "line",
    [
        "",
        "plain text",
        "[2025-03-04 05:06:07] [main] [DEBUG] unknown level",
        "[2025-13-40 05:06:07] [main] [INFO] impossible date",
        "2025-03-04 05:06:07 [main] [INFO] missing brackets",
    ],
)
def test_parse_line_rejects_malformed(line):
    assert parse_line(line) is None
