"""
Kill every process whose command line matches a pattern.

The run is a one-way pipeline of asyncio tasks joined by bounded channels:

    enumerator -> opener -> matcher -> terminator

Each stage closes its output once its input is exhausted, so the close
cascades forward and the terminator returns after joining every kill attempt.
Blocking psutil calls run on thread pools.

Usage:
    from process_killer.pipeline import kill_matching_processes_sync

    summary = kill_matching_processes_sync("victim-[ABC]")
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .pipeline_helpers import (
    ExclusionPolicy,
    ProcessEnumerator,
    ProcessMatcher,
    ProcessOpener,
    ProcessRecord,
    ProcessTerminator,
    RunCounters,
    RunSummary,
    StageChannel,
    compile_pattern,
    console,
)
from .pipeline_helpers.report import ConsoleOutput
from .settings import KillerSettings, get_killer_settings

logger = logging.getLogger(__name__)

_SCAN_WORKERS = 2


def build_exclusion_policy(settings: KillerSettings) -> ExclusionPolicy:
    return ExclusionPolicy.build(
        extra_pids=settings.exclude_pids,
        extra_patterns=settings.exclude_patterns,
        exclude_parent=settings.exclude_parent,
    )


async def kill_matching_processes(
    pattern: str,
    settings: Optional[KillerSettings] = None,
    *,
    exclusions: Optional[ExclusionPolicy] = None,
    console_output_func: ConsoleOutput = console,
) -> RunSummary:
    """
    Signal every live process whose command line matches *pattern*.

    Args:
        pattern: Regular expression searched for in each command line
        settings: Run settings; read from the environment when omitted
        exclusions: Processes never to signal; built from *settings* when omitted
        console_output_func: Receives one line per matched process

    Returns:
        Final counter values

    Raises:
        PatternCompileError: If *pattern* or an exclusion pattern is invalid
        ProcessTableUnavailableError: If live processes cannot be listed
        CommandLineUnavailableError: If an opened process's command line is unreadable
    """
    if settings is None:
        settings = get_killer_settings()
    compiled = compile_pattern(pattern)
    if exclusions is None:
        exclusions = build_exclusion_policy(settings)

    counters = RunCounters()
    pids: StageChannel[int] = StageChannel(settings.queue_size)
    records: StageChannel[ProcessRecord] = StageChannel(settings.queue_size)
    matched: StageChannel[ProcessRecord] = StageChannel(settings.queue_size)

    scan_executor = ThreadPoolExecutor(max_workers=_SCAN_WORKERS, thread_name_prefix="process-scan")
    kill_executor = ThreadPoolExecutor(max_workers=settings.max_concurrent_kills, thread_name_prefix="process-kill")
    # Stops pending exit waits when a fatal error aborts the run
    cancel_event = threading.Event()

    terminator = ProcessTerminator(
        counters,
        kill_signal=settings.kill_signal,
        max_concurrent_kills=settings.max_concurrent_kills,
        exit_timeout=settings.exit_timeout,
        executor=kill_executor,
        console_output_func=console_output_func,
        cancel_event=cancel_event,
    )
    stages = [
        asyncio.create_task(ProcessEnumerator(counters, scan_executor).run(pids)),
        asyncio.create_task(ProcessOpener(counters, scan_executor).run(pids, records)),
        asyncio.create_task(ProcessMatcher(compiled, exclusions, counters).run(records, matched)),
        asyncio.create_task(terminator.run(matched)),
    ]

    logger.info("Killing processes matching %r with %s", pattern, settings.kill_signal.name)
    try:
        await asyncio.gather(*stages)
    except BaseException:
        cancel_event.set()
        for stage in stages:
            stage.cancel()
        await asyncio.gather(*stages, return_exceptions=True)
        raise
    finally:
        scan_executor.shutdown(wait=False, cancel_futures=True)
        kill_executor.shutdown(wait=False, cancel_futures=True)

    summary = counters.snapshot()
    logger.info(
        "Run complete: %d matched, %d killed, %d protected",
        summary.matched,
        summary.killed,
        summary.protected,
    )
    return summary


def kill_matching_processes_sync(
    pattern: str,
    settings: Optional[KillerSettings] = None,
    *,
    exclusions: Optional[ExclusionPolicy] = None,
    console_output_func: ConsoleOutput = console,
) -> RunSummary:
    """Run :func:`kill_matching_processes` on a fresh event loop.

    Raises:
        RuntimeError: If called while an event loop is already running.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # Absence of running loop - expected when called from synchronous context
        loop = None

    if loop is not None and loop.is_running():
        raise RuntimeError(
            "kill_matching_processes_sync cannot run inside an active event loop. "
            "Use the async kill_matching_processes API instead."
        )

    return asyncio.run(
        kill_matching_processes(
            pattern,
            settings,
            exclusions=exclusions,
            console_output_func=console_output_func,
        )
    )


__all__ = ["build_exclusion_policy", "kill_matching_processes", "kill_matching_processes_sync"]
