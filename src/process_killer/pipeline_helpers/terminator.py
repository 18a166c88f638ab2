"""Signal matched processes and verify that they exited."""

from __future__ import annotations

import asyncio
import logging
import signal
import threading
import time
from concurrent.futures import Executor
from typing import List, Optional

import psutil

from .channel import StageChannel
from .counters import RunCounters
from .process_models import ProcessRecord, TerminationOutcome
from .report import ConsoleOutput, console, format_outcome

logger = logging.getLogger(__name__)

# Upper bound on a single blocking wait call
WAIT_SLICE_SECONDS = 0.25


def is_zombie(handle) -> bool:
    """True when *handle* has exited but its parent has not reaped it yet."""
    try:
        return handle.status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True
    except (psutil.AccessDenied, OSError):
        return False


def _next_slice(deadline: Optional[float]) -> float:
    if deadline is None:
        return WAIT_SLICE_SECONDS
    return max(0.0, min(WAIT_SLICE_SECONDS, deadline - time.monotonic()))


def wait_for_exit(
    handle,
    timeout: Optional[float],
    cancelled: Optional[threading.Event] = None,
) -> TerminationOutcome:
    """Block until *handle* exits and classify what was observed.

    The wait runs in short slices so a zombie left behind by a parent that
    never reaps it counts as exited, and so *cancelled* stops the wait within
    one slice. *timeout* bounds the whole wait; None waits until exit.

    Any return from the wait means the process is gone. An error while
    retrieving the exit status of a process that no longer exists still counts
    as killed; only a wait that never observed termination is protected.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    while True:
        try:
            exit_code = handle.wait(timeout=_next_slice(deadline))
        except (psutil.NoSuchProcess, ChildProcessError) as exc:
            logger.debug("Process %s exited; status unavailable: %s", handle.pid, exc)
            return TerminationOutcome.KILLED
        except psutil.TimeoutExpired:
            if is_zombie(handle):
                logger.debug("Process %s exited and awaits reaping by its parent", handle.pid)
                return TerminationOutcome.KILLED
            if cancelled is not None and cancelled.is_set():
                logger.debug("Stopped waiting for process %s", handle.pid)
                return TerminationOutcome.PROTECTED
            if deadline is not None and time.monotonic() >= deadline:
                logger.debug("Process %s still running after %ss", handle.pid, timeout)
                return TerminationOutcome.PROTECTED
            continue
        except (psutil.Error, OSError) as exc:
            logger.debug("Could not observe exit of process %s: %s", handle.pid, exc)
            return TerminationOutcome.PROTECTED
        logger.debug("Process %s exited with status %s", handle.pid, exit_code)
        return TerminationOutcome.KILLED


def send_signal(handle, kill_signal: signal.Signals) -> None:
    """Deliver *kill_signal* once; failures are left to the exit wait to classify."""
    try:
        handle.send_signal(kill_signal)
    except (psutil.Error, OSError) as exc:
        logger.debug("Sending %s to process %s failed: %s", kill_signal.name, handle.pid, exc)


class ProcessTerminator:
    """Final stage: one bounded, independent kill attempt per matched process."""

    def __init__(
        self,
        counters: RunCounters,
        *,
        kill_signal: signal.Signals,
        max_concurrent_kills: int,
        exit_timeout: Optional[float] = None,
        executor: Optional[Executor] = None,
        console_output_func: ConsoleOutput = console,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.counters = counters
        self.kill_signal = kill_signal
        self.max_concurrent_kills = max_concurrent_kills
        self.exit_timeout = exit_timeout
        self.executor = executor
        self.console_output_func = console_output_func
        self.cancel_event = cancel_event or threading.Event()

    async def terminate(self, record: ProcessRecord) -> TerminationOutcome:
        loop = asyncio.get_running_loop()
        # The exit wait is submitted before the signal goes out
        exit_wait = loop.run_in_executor(
            self.executor, wait_for_exit, record.handle, self.exit_timeout, self.cancel_event
        )
        send_signal(record.handle, self.kill_signal)
        outcome = await exit_wait

        self.console_output_func(format_outcome(record, outcome))
        self.counters.record_outcome(outcome)
        return outcome

    async def _terminate_bounded(self, record: ProcessRecord, slots: asyncio.Semaphore) -> TerminationOutcome:
        try:
            return await self.terminate(record)
        finally:
            slots.release()

    async def run(self, records: StageChannel[ProcessRecord]) -> List[TerminationOutcome]:
        """Fan out over *records* until the channel closes, then join every attempt."""
        slots = asyncio.Semaphore(self.max_concurrent_kills)
        attempts: List[asyncio.Task] = []
        try:
            async for record in records:
                await slots.acquire()
                attempts.append(asyncio.create_task(self._terminate_bounded(record, slots)))

            if not attempts:
                return []
            return list(await asyncio.gather(*attempts))
        except asyncio.CancelledError:
            for attempt in attempts:
                attempt.cancel()
            raise
