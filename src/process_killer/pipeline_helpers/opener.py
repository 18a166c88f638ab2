"""Acquire process handles and capture command lines."""

from __future__ import annotations

import asyncio
import logging
import os
from concurrent.futures import Executor
from typing import Optional

import psutil

from ..errors import CommandLineUnavailableError
from .channel import StageChannel
from .counters import RunCounters
from .process_models import ProcessRecord

logger = logging.getLogger(__name__)


def encode_cmdline(args) -> bytes:
    return b" ".join(os.fsencode(arg) for arg in args)


def open_process(pid: int) -> Optional[ProcessRecord]:
    """Open *pid* and snapshot its command line.

    Returns None when the process vanished or is not observable by this user.

    Raises:
        CommandLineUnavailableError: If the handle was acquired but the command
            line could not be read for any other reason
    """
    try:
        handle = psutil.Process(pid)
    except (psutil.NoSuchProcess, psutil.AccessDenied) as exc:
        logger.debug("Cannot open pid %s: %s", pid, exc)
        return None

    try:
        args = handle.cmdline()
    except (psutil.NoSuchProcess, psutil.AccessDenied) as exc:
        logger.debug("Cannot read command line of pid %s: %s", pid, exc)
        return None
    except (psutil.Error, OSError) as exc:
        raise CommandLineUnavailableError(pid, str(exc)) from exc

    return ProcessRecord(pid=pid, handle=handle, cmdline=encode_cmdline(args))


class ProcessOpener:
    """Second stage: turns pids into :class:`ProcessRecord` objects."""

    def __init__(self, counters: RunCounters, executor: Optional[Executor] = None):
        self.counters = counters
        self.executor = executor

    async def run(self, pids: StageChannel[int], output: StageChannel[ProcessRecord]) -> None:
        loop = asyncio.get_running_loop()
        async for pid in pids:
            record = await loop.run_in_executor(self.executor, open_process, pid)
            if record is None:
                self.counters.restricted.increment()
                continue
            await output.send(record)
        await output.close()
