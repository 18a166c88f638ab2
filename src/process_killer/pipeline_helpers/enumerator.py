"""List live process identifiers."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from typing import Iterator, List, Optional

import psutil

from ..errors import ProcessTableUnavailableError
from .channel import StageChannel
from .counters import RunCounters

logger = logging.getLogger(__name__)


def list_pids() -> List[int]:
    """Return every live pid in host order.

    Raises:
        ProcessTableUnavailableError: If the process table cannot be read at all
    """
    try:
        return psutil.pids()
    except (psutil.Error, OSError) as exc:
        raise ProcessTableUnavailableError.from_exception(exc) from exc


class ProcessEnumerator:
    """First stage: feeds every live pid into the pipeline."""

    def __init__(self, counters: RunCounters, executor: Optional[Executor] = None):
        self.counters = counters
        self.executor = executor

    def iter_pids(self, pids: List[int]) -> Iterator[int]:
        for pid in pids:
            self.counters.seen.increment()
            yield pid

    async def run(self, output: StageChannel[int]) -> None:
        loop = asyncio.get_running_loop()
        pids = await loop.run_in_executor(self.executor, list_pids)
        logger.debug("Enumerated %d live processes", len(pids))
        for pid in self.iter_pids(pids):
            await output.send(pid)
        await output.close()
