import threading
from pathlib import Path

import pytest

from logkeeper.config_loader import SinkConfig
from logkeeper.records import parse_line
from logkeeper.severity import Severity
from logkeeper.sink import LogSink
from logkeeper.store import rotated_files

THREADS = 8
ROUNDS = 25


def _hammer(sink: LogSink) -> None:
    barrier = threading.Barrier(THREADS)

    def _task():
        name = threading.current_thread().name
        barrier.wait()
        for i in range(ROUNDS):
            sink.log_info(f"{name} info {i}")
            sink.log_warning(f"{name} warning {i}")
            sink.log_error(f"{name} error {i}")

    threads = [threading.Thread(target=_task, name=f"origin-{n}") for n in range(THREADS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


@pytest.fixture(autouse=True)
def _quiet_console(capsys):
    """Swallow the console echo of several hundred records."""
    yield


def test_concurrent_writes_are_filtered_and_line_atomic(tmp_path: Path):
    log_path = tmp_path / "app.log"
    sink = LogSink(SinkConfig(min_severity=Severity.WARNING, log_path=log_path))
    _hammer(sink)
    sink.close()

    lines = log_path.read_text(encoding="utf-8").splitlines()
    entries = [parse_line(line) for line in lines]

    # Every line is a complete record ...
    assert all(entry is not None for entry in entries)
    # ... and exactly the WARNING/ERROR ones were kept
    assert len(entries) == THREADS * ROUNDS * 2
    assert all(entry.severity >= Severity.WARNING for entry in entries)
    expected = {
        f"origin-{n} {kind} {i}" for n in range(THREADS) for i in range(ROUNDS) for kind in ("warning", "error")
    }
    assert {entry.message for entry in entries} == expected
    # Origin recorded in the line matches the thread that logged it
    assert all(entry.message.startswith(entry.origin + " ") for entry in entries)


def test_no_record_lost_across_concurrent_rotations(tmp_path: Path):
    log_path = tmp_path / "app.log"
    sink = LogSink(SinkConfig(log_path=log_path, max_bytes=2048))
    _hammer(sink)
    sink.close()

    backups = rotated_files(log_path)
    assert backups, "Expected at least one rotation"
    assert [p.name for p in backups] == [f"app_{i}.log" for i in range(1, len(backups) + 1)]

    messages = []
    for path in [*backups, log_path]:
        entries = [parse_line(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert all(entry is not None for entry in entries)
        # Timestamps follow lock order within each file
        stamps = [entry.timestamp for entry in entries]
        assert stamps == sorted(stamps)
        messages.extend(entry.message for entry in entries)

    notices = [m for m in messages if m.startswith("Log file rotated to")]
    assert len(notices) == len(backups)
    assert len(messages) - len(notices) == THREADS * ROUNDS * 3
