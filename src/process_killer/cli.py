"""Command line entry point: ``process-killer PATTERN [PATTERN ...]``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import ConfigurationError
from .errors import ProcessKillerError
from .logging_config import resolve_log_file, setup_logging
from .pipeline import kill_matching_processes_sync
from .pipeline_helpers import console, format_summary
from .settings import KillerSettings, get_killer_settings, parse_signal

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="process-killer",
        description="Kill every process whose command line matches a regular expression.",
    )
    parser.add_argument(
        "pattern",
        nargs="+",
        help="Pattern words; joined with single spaces and compiled as one regular expression",
    )
    parser.add_argument("--signal", dest="signal_name", help="Signal to send (default: SIGKILL)")
    parser.add_argument(
        "--exclude-pid",
        type=int,
        action="append",
        default=[],
        metavar="PID",
        help="Never signal this pid (repeatable)",
    )
    parser.add_argument(
        "--exclude-pattern",
        action="append",
        default=[],
        metavar="REGEX",
        help="Never signal processes whose command line matches REGEX (repeatable)",
    )
    parser.add_argument(
        "--include-parent",
        action="store_true",
        help="Allow the process that launched this command to be matched",
    )
    parser.add_argument("--max-concurrent-kills", type=int, metavar="N", help="Upper bound on simultaneous kill attempts")
    parser.add_argument(
        "--exit-timeout",
        type=float,
        metavar="SECONDS",
        help="Give up waiting for a signalled process after SECONDS and count it protected",
    )
    parser.add_argument("--queue-size", type=int, metavar="N", help="Capacity of each pipeline channel")
    parser.add_argument("--log-file", type=Path, help="Also write diagnostics to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug diagnostics to stderr")
    return parser


def build_settings(args: argparse.Namespace, base: Optional[KillerSettings] = None) -> KillerSettings:
    """Apply command line options on top of the environment settings."""
    if base is None:
        base = get_killer_settings()
    return base.with_overrides(
        queue_size=args.queue_size,
        max_concurrent_kills=args.max_concurrent_kills,
        exit_timeout=args.exit_timeout,
        kill_signal=parse_signal(args.signal_name) if args.signal_name else None,
        exclude_pids=base.exclude_pids + tuple(args.exclude_pid) if args.exclude_pid else None,
        exclude_patterns=base.exclude_patterns + tuple(args.exclude_pattern) if args.exclude_pattern else None,
        exclude_parent=False if args.include_parent else None,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = build_settings(args)
    except ConfigurationError as exc:
        setup_logging(verbose=args.verbose)
        logger.error("Invalid configuration: %s", exc)
        return 1

    setup_logging(verbose=args.verbose, log_file=resolve_log_file(args.log_file, settings.log_dir))

    pattern = " ".join(args.pattern)
    try:
        summary = kill_matching_processes_sync(pattern, settings)
    except (ProcessKillerError, ConfigurationError) as exc:
        logger.error("%s", exc)
        return 1

    console(format_summary(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
