"""Tests for the closable stage channel."""

from __future__ import annotations

import asyncio

import pytest

from process_killer.pipeline_helpers import ChannelClosedError, StageChannel


async def _drain(channel: StageChannel) -> list:
    return [item async for item in channel]


@pytest.mark.asyncio
async def test_items_arrive_in_fifo_order_then_iteration_stops():
    channel: StageChannel[int] = StageChannel(maxsize=10)
    for item in (3, 1, 2):
        await channel.send(item)
    await channel.close()

    assert await _drain(channel) == [3, 1, 2]


@pytest.mark.asyncio
async def test_close_on_empty_channel_ends_consumer():
    channel: StageChannel[int] = StageChannel(maxsize=1)
    consumer = asyncio.create_task(_drain(channel))

    await channel.close()

    assert await asyncio.wait_for(consumer, timeout=1) == []


@pytest.mark.asyncio
async def test_bounded_channel_blocks_producer_until_consumed():
    channel: StageChannel[int] = StageChannel(maxsize=1)
    await channel.send(1)

    blocked = asyncio.create_task(channel.send(2))
    await asyncio.sleep(0.01)
    assert not blocked.done()

    consumer = asyncio.create_task(_drain(channel))
    await asyncio.wait_for(blocked, timeout=1)
    await channel.close()

    assert await asyncio.wait_for(consumer, timeout=1) == [1, 2]


@pytest.mark.asyncio
async def test_send_after_close_raises():
    channel: StageChannel[int] = StageChannel(maxsize=2)
    await channel.close()
    await channel.close()

    assert channel.closed
    with pytest.raises(ChannelClosedError):
        await channel.send(1)


def test_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        StageChannel(maxsize=0)
