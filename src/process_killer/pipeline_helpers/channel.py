"""Bounded, closable FIFO channel connecting two pipeline stages."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Generic, TypeVar

T = TypeVar("T")

_CLOSED = object()


class ChannelClosedError(RuntimeError):
    """Raised when a producer sends on a channel it already closed."""


class StageChannel(Generic[T]):
    """``asyncio.Queue`` with an explicit close marker.

    The producer calls :meth:`close` once its input is exhausted; consumers
    iterating with ``async for`` stop after draining everything sent before
    the close.
    """

    def __init__(self, maxsize: int) -> None:
        if maxsize <= 0:
            raise ValueError("channel capacity must be positive")
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, item: T) -> None:
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        await self._queue.put(item)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[T]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


__all__ = ["ChannelClosedError", "StageChannel"]
