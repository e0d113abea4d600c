"""Command-line inspector for Log Keeper log files.

Usage
-----
python scripts/log_inspect.py [--file PATH] [--level LEVEL]
                              [--since "YYYY-MM-DD HH:MM:SS"] [--until ...]
                              [--list-rotated]
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# Ensure project root is importable when the script is executed directly.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from logkeeper import ConfigLoader, LogReader, Severity, parse_line, rotated_files  # noqa: E402
from logkeeper.logging_config import setup_logging  # noqa: E402
from logkeeper.records import DATE_FORMAT  # noqa: E402


def _timestamp(value: str) -> datetime:
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected 'YYYY-MM-DD HH:MM:SS', got {value!r}") from exc


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:  # noqa: D401
    parser = argparse.ArgumentParser(
        description="Print records from a Log Keeper log file, optionally filtered by level and time.",
        epilog="Without --file the logfile named in the sink config (or app.log) is read.",
    )
    parser.add_argument(
        "--file",
        metavar="PATH",
        help="Log file to read (default: logfile from the config file).",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Sink config file used to locate the log when --file is omitted.",
    )
    parser.add_argument(
        "--level",
        type=str.upper,
        choices=[severity.name for severity in Severity],
        help="Only print records with exactly this severity.",
    )
    parser.add_argument(
        "--since",
        type=_timestamp,
        metavar="TIMESTAMP",
        help="Only print records at or after this local time.",
    )
    parser.add_argument(
        "--until",
        type=_timestamp,
        metavar="TIMESTAMP",
        help="Only print records at or before this local time.",
    )
    parser.add_argument(
        "--list-rotated",
        action="store_true",
        help="List rotated backups of the log file instead of printing records.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:  # noqa: D401 – CLI entrypoint
    """Inspect a log file and print the selected lines to stdout."""
    args = _parse_args(argv)
    setup_logging(level=logging.WARNING)

    log_path = Path(args.file) if args.file else ConfigLoader(args.config).load().log_path

    if args.list_rotated:
        for backup in rotated_files(log_path):
            print(backup)
        return 0

    reader = LogReader(log_path)
    if args.since is None and args.until is None:
        lines = reader.read_filtered(args.level)
    else:
        lines = reader.read_by_time(args.since or datetime.min, args.until or datetime.max)
        if args.level:
            wanted = Severity[args.level]
            lines = [line for line in lines if parse_line(line).severity is wanted]

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
