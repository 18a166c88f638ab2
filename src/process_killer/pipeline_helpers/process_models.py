"""Records passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TerminationOutcome(Enum):
    """Whether a signalled process was observed to exit."""

    KILLED = "killed"
    PROTECTED = "protected"


@dataclass(frozen=True)
class ProcessRecord:
    """A live process captured by the opener.

    ``cmdline`` is a snapshot taken at discovery time and may be stale by the
    time the record is matched or signalled.
    """

    pid: int
    handle: Any = field(repr=False, compare=False)
    cmdline: bytes

    @property
    def display_cmdline(self) -> str:
        return self.cmdline.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class RunSummary:
    """Final counter values of one run."""

    seen: int
    restricted: int
    scanned: int
    matched: int
    killed: int
    protected: int


__all__ = ["ProcessRecord", "RunSummary", "TerminationOutcome"]
