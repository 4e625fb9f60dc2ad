# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Result consumers: stream ProbeResults out of a channel as text lines."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterable, Callable
from typing import TextIO

from .errors import error_category_to_reason
from .models.probe import ProbeResult

logger = logging.getLogger(__name__)


def encode_json(result: ProbeResult) -> str:
    return json.dumps(result.to_dict())


def encode_text(result: ProbeResult) -> str:
    status = str(result.status_code) if result.status_code else "---"
    if result.ok:
        return f"{status} {result.url}"
    reason = error_category_to_reason(result.error_category)
    return f"{status} {result.url} ({reason}: {result.error})"


async def write_lines(
    results: AsyncIterable[ProbeResult],
    stream: TextIO,
    encode: Callable[[ProbeResult], str] = encode_json,
) -> int:
    """
    Drain ``results`` until the channel closes, writing one line per result.

    Encoding and write failures are logged and skipped so that a bad record
    never stalls the producers. Returns the number of lines written.
    """
    written = 0
    async for result in results:
        try:
            line = encode(result)
        except (TypeError, ValueError) as exc:
            logger.error("error: encode result for %s: %s", result.url, exc)
            continue
        try:
            stream.write(line + "\n")
            stream.flush()
        except OSError as exc:
            logger.error("error: write result for %s: %s", result.url, exc)
            continue
        written += 1
    return written


async def write_json_lines(results: AsyncIterable[ProbeResult], stream: TextIO) -> int:
    return await write_lines(results, stream, encode_json)


__all__ = ["encode_json", "encode_text", "write_json_lines", "write_lines"]
