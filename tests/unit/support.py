# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared helpers for the unit tests."""

import asyncio
from collections.abc import Callable

import httpx

from reachprobe.config import ProbeSettings
from reachprobe.http.httpx_client import HttpxClient


def mock_http_client(handler: Callable, settings: ProbeSettings | None = None) -> HttpxClient:
    settings = settings or ProbeSettings()
    transport = httpx.MockTransport(handler)
    return HttpxClient(
        settings,
        client=httpx.AsyncClient(transport=transport, follow_redirects=settings.allow_redirects),
    )


async def collect(results, count: int, timeout: float = 5.0) -> list:
    items = []
    async with asyncio.timeout(timeout):
        while len(items) < count:
            items.append(await results.receive())
    return items


async def drain(results, timeout: float = 5.0) -> list:
    """Consume until the channel closes."""
    async with asyncio.timeout(timeout):
        return [item async for item in results]
