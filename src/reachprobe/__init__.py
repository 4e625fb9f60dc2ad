# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
reachprobe package entrypoint.

reachprobe periodically checks the reachability of a fixed list of HTTP
endpoints and streams one ProbeResult per endpoint per interval through an
unbuffered channel. HTTP behavior is abstracted behind an injectable client
interface, and domain objects are modeled with typed dataclasses.
"""

from .channel import ResultChannel, ResultReceiver
from .config import ProbeSettings, load_probe_settings
from .errors import (
    ChannelClosedError,
    ConfigError,
    ErrorCategory,
    ReachProbeError,
    ServiceStateError,
)
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import ProbeResult, ServiceState
from .probe import probe_url
from .scope import CancelScope
from .service import Prober, ProbeService
from .version import __version__

__all__ = [
    "CancelScope",
    "ChannelClosedError",
    "ConfigError",
    "ErrorCategory",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "ProbeResult",
    "ProbeService",
    "ProbeSettings",
    "Prober",
    "ReachProbeError",
    "ResultChannel",
    "ResultReceiver",
    "ServiceState",
    "ServiceStateError",
    "StubHttpClient",
    "create_default_http_client",
    "load_probe_settings",
    "probe_url",
    "setup_logging",
    "__version__",
]
