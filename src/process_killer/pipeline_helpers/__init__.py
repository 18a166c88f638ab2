"""Stages of the discover, open, match and terminate pipeline."""

from .channel import ChannelClosedError, StageChannel
from .counters import AtomicCounter, RunCounters
from .enumerator import ProcessEnumerator, list_pids
from .matcher import ExclusionPolicy, ProcessMatcher, compile_pattern
from .opener import ProcessOpener, open_process
from .process_models import ProcessRecord, RunSummary, TerminationOutcome
from .report import console, format_outcome, format_summary
from .terminator import WAIT_SLICE_SECONDS, ProcessTerminator, is_zombie, send_signal, wait_for_exit

__all__ = [
    "WAIT_SLICE_SECONDS",
    "AtomicCounter",
    "ChannelClosedError",
    "ExclusionPolicy",
    "ProcessEnumerator",
    "ProcessMatcher",
    "ProcessOpener",
    "ProcessRecord",
    "ProcessTerminator",
    "RunCounters",
    "RunSummary",
    "StageChannel",
    "TerminationOutcome",
    "compile_pattern",
    "console",
    "format_outcome",
    "format_summary",
    "is_zombie",
    "list_pids",
    "open_process",
    "send_signal",
    "wait_for_exit",
]
