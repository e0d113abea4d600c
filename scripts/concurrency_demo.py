"""Multi-threaded demonstration of the shared log sink.

Several named threads log INFO/WARNING/ERROR records through the shared
sink at the same time.  Afterwards the minimum level is raised to ERROR,
one INFO record is dropped and one ERROR record kept, and the ERROR lines plus
the last minute of records are read back.
"""
import argparse
import sys
import threading
import time
from datetime import datetime, timedelta
from pathlib import Path

# Ensure project root is importable when the script is executed directly.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from logkeeper import LogSink, Severity  # noqa: E402
from logkeeper.logging_config import setup_logging  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:  # noqa: D401
    parser = argparse.ArgumentParser(
        description="Hammer the shared log sink from several threads, then read the log back.",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=3,
        metavar="N",
        help="Number of concurrent logging threads (default: 3).",
    )
    parser.add_argument(
        "--messages",
        type=int,
        default=3,
        metavar="M",
        help="Rounds of INFO/WARNING/ERROR records per thread (default: 3).",
    )
    parser.add_argument(
        "--pause",
        type=float,
        default=0.1,
        metavar="SECONDS",
        help="Sleep between rounds in each thread (default: 0.1).",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Sink config file (default: $LOGKEEPER_CONFIG or logger_config.txt).",
    )
    return parser.parse_args(argv)


def _logging_task(rounds: int, pause: float) -> None:
    sink = LogSink.get_instance()
    name = threading.current_thread().name
    for i in range(rounds):
        sink.log_info(f"{name} - info message {i}")
        sink.log_warning(f"{name} - warning message {i}")
        sink.log_error(f"{name} - error message {i}")
        time.sleep(pause)


def _print_section(title: str, lines: list[str]) -> None:
    print(f"\n=== {title} ===")
    for line in lines:
        print(line)
    print("=" * (len(title) + 8))


def main(argv: list[str] | None = None) -> int:  # noqa: D401 – CLI entrypoint
    """Run the demo against the shared sink."""
    args = _parse_args(argv)
    setup_logging()

    sink = LogSink.get_instance(args.config)

    threads = [
        threading.Thread(target=_logging_task, args=(args.messages, args.pause), name=f"Thread-{i}")
        for i in range(args.threads)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    sink.set_level(Severity.ERROR)
    sink.log_info("This INFO record is filtered out")
    sink.log_error("This ERROR record is written")

    reader = sink.reader()
    _print_section("LOG FILE (ERROR)", reader.read_filtered(Severity.ERROR))

    now = datetime.now()
    _print_section(f"LOG FILE ({now - timedelta(minutes=1):%H:%M:%S} - {now:%H:%M:%S})",
                   reader.read_by_time(now - timedelta(minutes=1), now))
    return 0


if __name__ == "__main__":
    sys.exit(main())
