# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Unbuffered result channel.

``ResultChannel`` is a rendezvous point between any number of producers and a
single consumer: ``send`` only returns once the consumer has taken the item,
so a slow consumer slows producers down instead of losing results. Closing
the channel ends iteration for the consumer and fails any producer that is
still parked in ``send``.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

from .errors import ChannelClosedError

T = TypeVar("T")


class ResultChannel(Generic[T]):
    def __init__(self) -> None:
        self._senders: deque[tuple[T, asyncio.Future[None]]] = deque()
        self._receivers: deque[asyncio.Future[None]] = deque()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _wake_receiver(self) -> None:
        while self._receivers:
            waiter = self._receivers.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return

    async def send(self, item: T) -> None:
        """Offer ``item`` and wait until the consumer takes it."""
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        delivered: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        entry = (item, delivered)
        self._senders.append(entry)
        self._wake_receiver()
        try:
            await delivered
        except asyncio.CancelledError:
            if not delivered.done():
                self._senders.remove(entry)
            raise

    async def receive(self) -> T:
        """Take the next offered item; raises ChannelClosedError once closed."""
        while True:
            while self._senders:
                item, delivered = self._senders.popleft()
                if delivered.done():
                    continue
                delivered.set_result(None)
                return item
            if self._closed:
                raise ChannelClosedError("receive on closed channel")
            waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
            self._receivers.append(waiter)
            try:
                await waiter
            except asyncio.CancelledError:
                if waiter in self._receivers:
                    self._receivers.remove(waiter)
                if waiter.done() and not waiter.cancelled():
                    self._wake_receiver()
                raise

    def close(self) -> None:
        """Close the channel; idempotent."""
        if self._closed:
            return
        self._closed = True
        while self._senders:
            _, delivered = self._senders.popleft()
            if not delivered.done():
                delivered.set_exception(ChannelClosedError("channel closed before the result was received"))
        while self._receivers:
            waiter = self._receivers.popleft()
            if not waiter.done():
                waiter.set_result(None)

    def reader(self) -> ResultReceiver[T]:
        return ResultReceiver(self)


class ResultReceiver(Generic[T]):
    """Read-only view over a ResultChannel."""

    def __init__(self, channel: ResultChannel[T]):
        self._channel = channel

    @property
    def closed(self) -> bool:
        return self._channel.closed

    async def receive(self) -> T:
        return await self._channel.receive()

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self._channel.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None
