"""Pattern matching and exclusion of scanned processes."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from re import Pattern
from typing import FrozenSet, Iterable, Optional, Tuple

from ..errors import PatternCompileError
from .channel import StageChannel
from .counters import RunCounters
from .process_models import ProcessRecord

logger = logging.getLogger(__name__)


def compile_pattern(text: str) -> Pattern[bytes]:
    """Compile *text* into a regular expression over command-line bytes."""
    try:
        return re.compile(os.fsencode(text))
    except re.error as exc:
        raise PatternCompileError(text, str(exc)) from exc


@dataclass(frozen=True)
class ExclusionPolicy:
    """Processes that are never forwarded, whatever the user pattern says."""

    pids: FrozenSet[int] = frozenset()
    patterns: Tuple[Pattern[bytes], ...] = field(default=())

    @classmethod
    def build(
        cls,
        *,
        extra_pids: Iterable[int] = (),
        extra_patterns: Iterable[str] = (),
        exclude_parent: bool = True,
        current_pid: Optional[int] = None,
        parent_pid: Optional[int] = None,
    ) -> "ExclusionPolicy":
        """The current pid is always excluded; the launcher unless *exclude_parent* is off."""
        pids = {current_pid if current_pid is not None else os.getpid()}
        if exclude_parent:
            pids.add(parent_pid if parent_pid is not None else os.getppid())
        pids.update(extra_pids)
        # pid 0 is what getppid reports for an orphan on some platforms
        pids.discard(0)
        return cls(
            pids=frozenset(pids),
            patterns=tuple(compile_pattern(text) for text in extra_patterns),
        )

    def excludes(self, record: ProcessRecord) -> bool:
        if record.pid in self.pids:
            return True
        return any(pattern.search(record.cmdline) for pattern in self.patterns)


class ProcessMatcher:
    """Third stage: forwards records whose command line matches the pattern."""

    def __init__(self, pattern: Pattern[bytes], exclusions: ExclusionPolicy, counters: RunCounters):
        self.pattern = pattern
        self.exclusions = exclusions
        self.counters = counters

    def matches(self, record: ProcessRecord) -> bool:
        if self.pattern.search(record.cmdline) is None:
            return False
        if self.exclusions.excludes(record):
            logger.debug("Skipping excluded process %s", record.pid)
            return False
        return True

    async def run(self, records: StageChannel[ProcessRecord], output: StageChannel[ProcessRecord]) -> None:
        async for record in records:
            self.counters.scanned.increment()
            if not self.matches(record):
                continue
            self.counters.matched.increment()
            await output.send(record)
        await output.close()
