# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import asyncio
import socket
from collections.abc import Iterator
from enum import Enum

import httpx


class ReachProbeError(Exception):
    """Base class for errors raised by reachprobe itself."""


class ConfigError(ReachProbeError, ValueError):
    """Invalid settings or endpoint list."""


class ChannelClosedError(ReachProbeError):
    """Send or receive on a closed result channel."""


class ServiceStateError(ReachProbeError, RuntimeError):
    """Lifecycle operation called in a state that does not allow it."""


class ErrorCategory(str, Enum):
    INVALID_REQUEST = "INVALID_REQUEST"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
    DNS_ERROR = "DNS_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    BODY_READ_ERROR = "BODY_READ_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map httpx/asyncio/socket exceptions raised while probing to ErrorCategory.
    """
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return ErrorCategory.INVALID_REQUEST

    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, asyncio.CancelledError):
        return ErrorCategory.CANCELLED

    if any(isinstance(item, (socket.gaierror, socket.herror)) for item in _exception_chain(exc)):
        return ErrorCategory.DNS_ERROR

    if isinstance(
        exc,
        (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError, ConnectionError),
    ):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def describe_exception(exc: BaseException) -> str:
    """Readable one-line message for a probe failure, never empty."""
    message = str(exc).strip()
    if message:
        return f"{type(exc).__name__}: {message}"
    return type(exc).__name__


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.INVALID_REQUEST: "Request could not be built",
        ErrorCategory.TIMEOUT: "Probe deadline exceeded",
        ErrorCategory.CANCELLED: "Probe cancelled by shutdown",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.BODY_READ_ERROR: "Response body could not be read",
        ErrorCategory.UNKNOWN_ERROR: "Network error during probe",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed due to network error")
