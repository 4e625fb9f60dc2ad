# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable HttpClient implementations."""

from __future__ import annotations

import asyncio

from ..errors import ErrorCategory
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """Deterministic, programmable HttpClient for tests and dry runs.

    ``delays`` holds per-URL latencies in seconds, applied before the stubbed
    response is returned so deadline and cancellation paths can be exercised.
    """

    def __init__(
        self,
        responses: dict[str, HttpResponse] | None = None,
        delays: dict[str, float] | None = None,
    ):
        self._responses = responses or {}
        self._delays = delays or {}
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: HttpResponse, *, delay: float = 0.0) -> None:
        self._responses[url] = response
        if delay:
            self._delays[url] = delay

    async def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        delay = self._delays.get(request.url, 0.0)
        if delay > 0:
            await asyncio.sleep(delay)
        if request.url in self._responses:
            return self._responses[request.url]
        return HttpResponse(
            ok=False,
            status_code=None,
            error_message="No stubbed response configured",
            error_category=ErrorCategory.CONNECTION_ERROR,
        )

    async def aclose(self) -> None:
        self.closed = True
