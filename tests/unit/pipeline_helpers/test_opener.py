"""Tests for the opener stage."""

from __future__ import annotations

import os
from unittest.mock import patch

import psutil
import pytest

from process_killer.errors import CommandLineUnavailableError
from process_killer.pipeline_helpers import ProcessOpener, RunCounters, StageChannel, open_process
from process_killer.pipeline_helpers.opener import encode_cmdline
from tests.helpers.process_stubs import FakeHandle, process_factory


class TestOpenProcess:
    def test_captures_command_line_bytes(self) -> None:
        handle = FakeHandle(42, ["python3", "-m", "worker", "--id=7"])
        with patch("psutil.Process", return_value=handle):
            record = open_process(42)

        assert record is not None
        assert record.pid == 42
        assert record.handle is handle
        assert record.cmdline == b"python3 -m worker --id=7"

    @pytest.mark.parametrize(
        "error",
        [psutil.NoSuchProcess(42), psutil.AccessDenied(42), psutil.ZombieProcess(42)],
    )
    def test_unopenable_process_is_dropped(self, error) -> None:
        with patch("psutil.Process", side_effect=error):
            assert open_process(42) is None

    @pytest.mark.parametrize("error", [psutil.NoSuchProcess(42), psutil.AccessDenied(42)])
    def test_vanished_or_denied_during_read_is_dropped(self, error) -> None:
        with patch("psutil.Process", return_value=FakeHandle(42, cmdline_effect=error)):
            assert open_process(42) is None

    @pytest.mark.parametrize("error", [psutil.Error("broken"), OSError("I/O error")])
    def test_unreadable_command_line_is_fatal(self, error) -> None:
        with patch("psutil.Process", return_value=FakeHandle(42, cmdline_effect=error)):
            with pytest.raises(CommandLineUnavailableError) as excinfo:
                open_process(42)

        assert excinfo.value.pid == 42

    def test_empty_command_line_is_kept(self) -> None:
        with patch("psutil.Process", return_value=FakeHandle(2, [])):
            record = open_process(2)

        assert record is not None
        assert record.cmdline == b""


def test_encode_cmdline_round_trips_undecodable_bytes():
    raw = os.fsdecode(b"\xff\xfe")

    assert encode_cmdline(["a", raw]) == b"a \xff\xfe"


@pytest.mark.asyncio
async def test_run_forwards_openable_and_counts_restricted():
    counters = RunCounters()
    pids: StageChannel[int] = StageChannel(maxsize=10)
    output = StageChannel(maxsize=10)
    handles = {
        1: FakeHandle(1, ["init"]),
        2: psutil.AccessDenied(2),
        3: psutil.NoSuchProcess(3),
        4: FakeHandle(4, ["sleep", "60"]),
    }
    for pid in handles:
        await pids.send(pid)
    await pids.close()

    with patch("psutil.Process", side_effect=process_factory(handles)):
        await ProcessOpener(counters).run(pids, output)

    records = [record async for record in output]
    assert [record.pid for record in records] == [1, 4]
    assert counters.restricted.value == 2
