# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cancellation scopes.

A CancelScope carries an optional deadline (event-loop time) and a cancelled
flag. Child scopes inherit cancellation from their parent and may carry a
tighter deadline. Code run under ``scope.bound()`` is interrupted with
``TimeoutError`` when the deadline passes or when the scope, or any of its
ancestors, is cancelled.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress


class CancelScope:
    def __init__(self, *, deadline: float | None = None, parent: CancelScope | None = None):
        self._parent = parent
        self._deadline = deadline
        self._cancelled = False
        self._cancelled_event = asyncio.Event()
        self._children: weakref.WeakSet[CancelScope] = weakref.WeakSet()
        self._timeouts: set[asyncio.Timeout] = set()
        if parent is not None:
            parent._children.add(self)
            if parent.cancelled:
                self._mark_cancelled()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def deadline(self) -> float | None:
        """Effective deadline: the earliest of this scope's and its ancestors'."""
        candidates = [self._deadline]
        if self._parent is not None:
            candidates.append(self._parent.deadline)
        known = [value for value in candidates if value is not None]
        return min(known) if known else None

    def child(self, timeout: float | None = None) -> CancelScope:
        """Derive a sub-scope that expires ``timeout`` seconds from now."""
        deadline = None
        if timeout is not None:
            deadline = asyncio.get_running_loop().time() + timeout
        return CancelScope(deadline=deadline, parent=self)

    def cancel(self) -> None:
        """Cancel this scope and every descendant; idempotent."""
        if self._cancelled:
            return
        self._mark_cancelled()
        now = asyncio.get_running_loop().time()
        for timeout in list(self._timeouts):
            if not timeout.expired():
                timeout.reschedule(now)
        for child in list(self._children):
            child.cancel()

    def _mark_cancelled(self) -> None:
        self._cancelled = True
        self._cancelled_event.set()

    @asynccontextmanager
    async def bound(self) -> AsyncIterator[None]:
        loop = asyncio.get_running_loop()
        when = loop.time() if self._cancelled else self.deadline
        async with asyncio.timeout_at(when) as timeout:
            self._timeouts.add(timeout)
            try:
                yield
            finally:
                self._timeouts.discard(timeout)

    async def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, waking early if the scope is cancelled."""
        if self._cancelled:
            return
        with suppress(TimeoutError):
            async with asyncio.timeout(delay):
                await self._cancelled_event.wait()
