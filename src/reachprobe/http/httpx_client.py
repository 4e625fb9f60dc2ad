# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import httpx

from ..config import ProbeSettings, load_probe_settings
from ..errors import ErrorCategory, categorize_exception, describe_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class HttpxClient(HttpClient):
    """Asynchronous httpx client wrapper sharing one connection pool across probes."""

    def __init__(self, settings: ProbeSettings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or load_probe_settings()
        self._client = client or httpx.AsyncClient(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.interval,
        )

    async def request(self, request: HttpRequest) -> HttpResponse:
        try:
            async with self._client.stream(
                request.method,
                request.url,
                follow_redirects=request.allow_redirects,
            ) as resp:
                if request.on_headers is not None:
                    request.on_headers(resp.status_code)
                try:
                    content = await resp.aread()
                except Exception as exc:  # noqa: BLE001
                    return HttpResponse(
                        ok=False,
                        status_code=resp.status_code,
                        headers=dict(resp.headers),
                        url=str(resp.url),
                        error_message=describe_exception(exc),
                        error_category=ErrorCategory.BODY_READ_ERROR,
                    )

            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=dict(resp.headers),
                content=content,
                url=str(resp.url),
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse(
                ok=False,
                error_message=describe_exception(exc),
                error_category=categorize_exception(exc),
            )

    async def aclose(self) -> None:
        await self._client.aclose()
