import io
import logging

import pytest

from logkeeper.config_loader import ConfigLoader, SinkConfig
from logkeeper.logging_config import PACKAGE_LOGGER, reset_logging, setup_logging
from logkeeper.sink import LogSink


@pytest.fixture(autouse=True)
def _reset():
    reset_logging()
    yield
    reset_logging()


def test_setup_is_idempotent():
    first = setup_logging(stream=io.StringIO())
    second = setup_logging(stream=io.StringIO())

    assert first is second is logging.getLogger(PACKAGE_LOGGER)
    assert len(first.handlers) == 1


def test_diagnostics_reach_configured_stream(tmp_path):
    stream = io.StringIO()
    setup_logging(level=logging.WARNING, stream=stream)

    bad = tmp_path / "bad.cfg"
    bad.write_text("maxsize=huge\n", encoding="utf-8")
    ConfigLoader(bad).load()

    output = stream.getvalue()
    assert "| WARNING  | logkeeper.config_loader | Failed to load config" in output


def test_write_failure_reaches_stderr_by_default(tmp_path, capsys):
    setup_logging()

    blocked = tmp_path / "blocked.log"
    blocked.mkdir()
    sink = LogSink(SinkConfig(log_path=blocked))
    try:
        sink.log_warning("nowhere to go")
    finally:
        sink.close()

    err = capsys.readouterr().err
    assert "| ERROR    | logkeeper.store | Could not write log record" in err


def test_reset_detaches_handler():
    setup_logging(stream=io.StringIO())
    reset_logging()
    assert logging.getLogger(PACKAGE_LOGGER).handlers == []
