# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Periodic probe service.

ProbeService launches one probe per endpoint on every interval ("wave"),
bounds each wave by a deadline equal to the interval, and streams every
ProbeResult through an unbuffered channel as it completes. Waves may overlap
when probes run long. A semaphore caps how many workers are alive at once,
from launch until the consumer takes their result, so a stalled consumer
holds the scheduler back instead of piling up workers. ``close()`` cancels
outstanding probes, waits for them to hand over their results, and only then
closes the channel.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Protocol

from .channel import ResultChannel, ResultReceiver
from .config import ProbeSettings, load_probe_settings
from .errors import ChannelClosedError, ConfigError, ServiceStateError
from .http.client import HttpClient, create_default_http_client
from .models.probe import ProbeResult
from .models.service import ServiceState
from .probe.worker import probe_url
from .scope import CancelScope

logger = logging.getLogger(__name__)


class Prober(Protocol):
    """Capability set shared by probe services and their test doubles."""

    def start(self) -> None: ...

    async def close(self) -> None: ...

    @property
    def results(self) -> ResultReceiver[ProbeResult]: ...


class ProbeService:
    """
    Probe a fixed list of endpoints on a fixed interval.

    ``start()`` must be called at most once, from inside a running event loop.
    The HTTP client is shared by every probe and is closed together with the
    service, whether it was injected or built from ``settings``.
    """

    def __init__(
        self,
        endpoints: Iterable[str],
        *,
        settings: ProbeSettings | None = None,
        http_client: HttpClient | None = None,
    ):
        self.endpoints: tuple[str, ...] = tuple(endpoints)
        if not self.endpoints:
            raise ConfigError("at least one endpoint is required")
        self.settings = (settings or load_probe_settings()).validate()
        self.http_client = http_client or create_default_http_client(self.settings)

        self._channel: ResultChannel[ProbeResult] = ResultChannel()
        self._scope = CancelScope()
        self._slots = asyncio.Semaphore(self.settings.max_concurrency) if self.settings.max_concurrency else None
        self._inflight: set[asyncio.Task[None]] = set()
        self._scheduler: asyncio.Task[None] | None = None
        self._closed = asyncio.Event()
        self._state = ServiceState.CREATED
        self._wave = 0

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def results(self) -> ResultReceiver[ProbeResult]:
        return self._channel.reader()

    @property
    def inflight(self) -> int:
        """Number of probes launched but not yet delivered."""
        return len(self._inflight)

    def start(self) -> None:
        if self._state is not ServiceState.CREATED:
            raise ServiceStateError(f"cannot start a probe service in state {self._state.value}")
        self._state = ServiceState.RUNNING
        logger.info(
            "Starting probes for %d endpoint(s) every %.3fs",
            len(self.endpoints),
            self.settings.interval,
        )
        self._scheduler = asyncio.create_task(self._run(), name="reachprobe-scheduler")

    async def _run(self) -> None:
        while not self._scope.cancelled:
            self._wave += 1
            wave_scope = self._scope.child(self.settings.interval)
            logger.debug("Wave %d: probing %d endpoint(s)", self._wave, len(self.endpoints))
            for url in self.endpoints:
                if not await self._acquire_slot():
                    logger.debug("Wave %d: launch interrupted by shutdown", self._wave)
                    return
                task = asyncio.create_task(self._probe_and_deliver(url, wave_scope, self._wave))
                self._inflight.add(task)
                task.add_done_callback(self._inflight.discard)
            await self._scope.sleep(self.settings.interval)

    async def _acquire_slot(self) -> bool:
        """Wait for a free worker slot; False if the service is closing first."""
        if self._slots is None:
            return True
        try:
            async with self._scope.bound():
                await self._slots.acquire()
        except TimeoutError:
            return False
        return True

    async def _probe_and_deliver(self, url: str, scope: CancelScope, wave: int) -> None:
        # The slot is held until the consumer takes the result.
        try:
            result = await probe_url(
                self.http_client,
                url,
                scope=scope,
                wave=wave,
                allow_redirects=self.settings.allow_redirects,
            )
            logger.debug("Wave %d: %s -> %d %s", wave, url, result.status_code, result.error or "")
            try:
                await self._channel.send(result)
            except ChannelClosedError:
                logger.warning("Dropping result for %s (wave %d): result channel already closed", url, wave)
        finally:
            if self._slots is not None:
                self._slots.release()

    async def close(self) -> None:
        """
        Stop probing and close the result channel.

        Outstanding probes are cancelled and given ``drain_timeout`` seconds to
        hand their results to the consumer. Later calls wait for the first one
        to finish and do nothing else.
        """
        if self._state in (ServiceState.CLOSING, ServiceState.CLOSED):
            await self._closed.wait()
            return

        self._state = ServiceState.CLOSING
        logger.info("Stopping probes")
        self._scope.cancel()
        try:
            if self._scheduler is not None:
                await self._scheduler

            pending = set(self._inflight)
            if pending:
                _, pending = await asyncio.wait(pending, timeout=self.settings.drain_timeout)
            if pending:
                logger.warning(
                    "%d probe result(s) not received within %.3fs drain timeout",
                    len(pending),
                    self.settings.drain_timeout,
                )
            self._channel.close()
            if pending:
                await asyncio.wait(pending)

            try:
                await self.http_client.aclose()
            except Exception:  # noqa: BLE001
                logger.warning("Failed to close HTTP client", exc_info=True)
        finally:
            self._channel.close()
            self._state = ServiceState.CLOSED
            self._closed.set()
        logger.info("Probes stopped after %d wave(s)", self._wave)

    async def __aenter__(self) -> ProbeService:
        self.start()
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.close()
