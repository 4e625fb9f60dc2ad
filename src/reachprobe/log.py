# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for the reachprobe CLI and embedding applications."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_log_level(level: str | None = None) -> int:
    """Map ``level`` (or ``$REACHPROBE_LOG_LEVEL``, read now) to a logging level; unknown names mean WARNING."""
    name = (level or os.getenv("REACHPROBE_LOG_LEVEL") or "WARNING").strip().upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | None = None) -> None:
    effective = resolve_log_level(level)
    logging.basicConfig(level=effective, format=LOG_FORMAT)
    # httpx logs every request at INFO; one line per probe per wave is noise.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(effective, logging.WARNING))


__all__ = ["resolve_log_level", "setup_logging"]
