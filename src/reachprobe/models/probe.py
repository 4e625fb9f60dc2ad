# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe result model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import ErrorCategory


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of one GET against one endpoint.

    ``status_code`` is 0 when no response arrived. A non-2xx status is a valid
    result, not an error; ``error`` is only set when building the request,
    the transport, or reading the body failed. ``body`` stays out of
    ``repr`` and ``to_dict``.
    """

    url: str
    status_code: int = 0
    body: bytes = field(default=b"", repr=False)
    error: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE
    wave: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "URL": self.url,
            "StatusCode": self.status_code,
            "Error": self.error,
        }
