# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for reachprobe."""

import os
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_INTERVAL_MS = 3000


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_int_env(name: str, default: int | None) -> int | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = int(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass
class ProbeSettings:
    """Probe scheduling and transport defaults.

    ``interval`` is both the wave period and each wave's deadline, in seconds.
    ``drain_timeout`` caps how long ``close()`` waits for outstanding workers.
    ``max_concurrency`` bounds live workers across overlapping waves, counting
    each from launch until its result is received; ``None`` leaves it unbounded.
    """

    interval: float = DEFAULT_INTERVAL_MS / 1000
    drain_timeout: float = 1.0
    max_concurrency: int | None = 100
    allow_redirects: bool = True

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        interval_ms = _float_env("REACHPROBE_INTERVAL_MS", cls.interval * 1000)
        if interval_ms <= 0:
            interval_ms = DEFAULT_INTERVAL_MS
        drain_timeout = _float_env("REACHPROBE_DRAIN_TIMEOUT", cls.drain_timeout)
        if drain_timeout < 0:
            drain_timeout = cls.drain_timeout
        return cls(
            interval=interval_ms / 1000,
            drain_timeout=drain_timeout,
            max_concurrency=_optional_int_env("REACHPROBE_MAX_CONCURRENCY", cls.max_concurrency),
            allow_redirects=_bool_env("REACHPROBE_HTTP_REDIRECTS", cls.allow_redirects),
        )

    def validate(self) -> "ProbeSettings":
        if self.interval <= 0:
            raise ConfigError(f"probe interval must be positive, got {self.interval!r}")
        if self.drain_timeout < 0:
            raise ConfigError(f"drain timeout must not be negative, got {self.drain_timeout!r}")
        if self.max_concurrency is not None and self.max_concurrency <= 0:
            self.max_concurrency = None
        return self


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()
