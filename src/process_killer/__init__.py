"""Kill running processes whose command line matches a regular expression."""

from .errors import (
    CommandLineUnavailableError,
    PatternCompileError,
    ProcessKillerError,
    ProcessTableUnavailableError,
)
from .pipeline import kill_matching_processes, kill_matching_processes_sync
from .pipeline_helpers import RunSummary, TerminationOutcome
from .settings import KillerSettings, get_killer_settings

__version__ = "0.1.0"

__all__ = [
    "CommandLineUnavailableError",
    "KillerSettings",
    "PatternCompileError",
    "ProcessKillerError",
    "ProcessTableUnavailableError",
    "RunSummary",
    "TerminationOutcome",
    "get_killer_settings",
    "kill_matching_processes",
    "kill_matching_processes_sync",
]
