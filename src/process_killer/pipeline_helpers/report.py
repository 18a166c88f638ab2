"""Human-readable run output."""

from __future__ import annotations

from typing import Callable

from .process_models import ProcessRecord, RunSummary, TerminationOutcome

ConsoleOutput = Callable[[str], None]


def console(message: str) -> None:
    print(message, flush=True)


def format_outcome(record: ProcessRecord, outcome: TerminationOutcome) -> str:
    if outcome is TerminationOutcome.KILLED:
        return f"Killed Process {record.pid}: '{record.display_cmdline}'"
    return f"Could not kill {record.pid}: '{record.display_cmdline}'"


def format_summary(summary: RunSummary) -> str:
    lines = [
        "Stats:",
        f"\t{summary.seen} Processes",
        f"\t{summary.restricted} Restricted",
        f"\t{summary.scanned} Scanned",
        f"\t{summary.matched} Matched",
        f"\t{summary.killed} Killed",
        f"\t{summary.protected} Protected",
    ]
    return "\n".join(lines)


__all__ = ["ConsoleOutput", "console", "format_outcome", "format_summary"]
