# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the probe worker."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import ErrorCategory

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """
    Normalized request representation consumed by HttpClient implementations.

    ``on_headers`` is called with the final status code as soon as the response
    headers arrive, before the body is read.
    """

    url: str
    method: str = "GET"
    allow_redirects: bool = True
    on_headers: Callable[[int], None] | None = field(default=None, repr=False, compare=False)


@dataclass
class HttpResponse:
    """
    Normalized HTTP response.

    ``ok`` is False whenever an exception interrupted the exchange. A failure
    with ``status_code`` set happened after the response headers arrived.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE
