"""Thread-safe run counters."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .process_models import RunSummary, TerminationOutcome


class AtomicCounter:
    """Monotonic counter whose increments are serialised by a lock."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.value})"


@dataclass
class RunCounters:
    """The six per-run tallies, each owned by the stage that produces its events."""

    seen: AtomicCounter = field(default_factory=AtomicCounter)
    restricted: AtomicCounter = field(default_factory=AtomicCounter)
    scanned: AtomicCounter = field(default_factory=AtomicCounter)
    matched: AtomicCounter = field(default_factory=AtomicCounter)
    killed: AtomicCounter = field(default_factory=AtomicCounter)
    protected: AtomicCounter = field(default_factory=AtomicCounter)

    def record_outcome(self, outcome: TerminationOutcome) -> None:
        if outcome is TerminationOutcome.KILLED:
            self.killed.increment()
        else:
            self.protected.increment()

    def snapshot(self) -> RunSummary:
        return RunSummary(
            seen=self.seen.value,
            restricted=self.restricted.value,
            scanned=self.scanned.value,
            matched=self.matched.value,
            killed=self.killed.value,
            protected=self.protected.value,
        )


__all__ = ["AtomicCounter", "RunCounters"]
