# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for reachprobe."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .probe import ProbeResult
from .service import ServiceState

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ProbeResult",
    "ServiceState",
]
