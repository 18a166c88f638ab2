"""Fatal error types raised by the kill pipeline."""

from __future__ import annotations


class ProcessKillerError(RuntimeError):
    """Base class for errors that abort the whole run."""


class ProcessTableUnavailableError(ProcessKillerError):
    """Raised when the live process table cannot be listed at all."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ProcessTableUnavailableError":
        return cls(f"Error reading process table: {exc}")


class CommandLineUnavailableError(ProcessKillerError):
    """Raised when an opened process's command line cannot be read."""

    def __init__(self, pid: int, reason: str = "") -> None:
        message = f"could not read command line of pid {pid}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.pid = pid
        self.reason = reason


class PatternCompileError(ProcessKillerError, ValueError):
    """Raised when a user or exclusion pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"could not compile: '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


__all__ = [
    "CommandLineUnavailableError",
    "PatternCompileError",
    "ProcessKillerError",
    "ProcessTableUnavailableError",
]
