# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-endpoint probe: one deadline-bound GET turned into a ProbeResult."""

from __future__ import annotations

import logging

from ..errors import ErrorCategory, categorize_exception, describe_exception
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse
from ..models.probe import ProbeResult
from ..scope import CancelScope

logger = logging.getLogger(__name__)


def result_from_response(url: str, response: HttpResponse, *, wave: int = 0) -> ProbeResult:
    """Translate a normalized HttpResponse into a ProbeResult."""
    status_code = response.status_code or 0
    if response.ok:
        return ProbeResult(url=url, status_code=status_code, body=response.content, wave=wave)

    category = response.error_category
    if category is ErrorCategory.NONE:
        category = ErrorCategory.UNKNOWN_ERROR
    return ProbeResult(
        url=url,
        status_code=status_code,
        error=response.error_message or category.value,
        error_category=category,
        wave=wave,
    )


async def probe_url(
    client: HttpClient,
    url: str,
    *,
    scope: CancelScope | None = None,
    wave: int = 0,
    allow_redirects: bool = True,
) -> ProbeResult:
    """
    GET ``url`` once and return the outcome; never raises for probe failures.

    The whole attempt runs under ``scope``: when its deadline passes or it is
    cancelled, the request is abandoned. The result then carries the error and
    the status code of the response if its headers had already arrived, else 0.
    """
    scope = scope or CancelScope()
    received: list[int] = []
    request = HttpRequest(url=url, allow_redirects=allow_redirects, on_headers=received.append)
    try:
        async with scope.bound():
            response = await client.request(request)
    except TimeoutError:
        if scope.cancelled:
            category, reason = ErrorCategory.CANCELLED, "probe cancelled"
        else:
            category, reason = ErrorCategory.TIMEOUT, "deadline exceeded"
        return ProbeResult(
            url=url,
            status_code=received[-1] if received else 0,
            error=f"GET {url}: {reason}",
            error_category=category,
            wave=wave,
        )
    except Exception as exc:  # noqa: BLE001
        logger.debug("HttpClient raised instead of returning an error response for %s", url, exc_info=True)
        return ProbeResult(
            url=url,
            error=describe_exception(exc),
            error_category=categorize_exception(exc),
            wave=wave,
        )

    return result_from_response(url, response, wave=wave)
