# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""reachprobe CLI."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from contextlib import suppress
from typing import TextIO

from ..config import ProbeSettings, load_probe_settings
from ..errors import ConfigError
from ..log import setup_logging
from ..output import encode_json, encode_text, write_lines
from ..service import Prober, ProbeService

logger = logging.getLogger(__name__)

_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Periodically probe HTTP endpoints and stream the results")
    parser.add_argument("urls", nargs="+", metavar="URL", help="Endpoint to probe (repeat for more)")
    parser.add_argument(
        "--interval-ms",
        type=float,
        default=None,
        help="Probe interval and per-wave deadline in milliseconds (default: 3000)",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=None,
        help="Cap on probes awaiting delivery across overlapping waves (0 disables the cap)",
    )
    parser.add_argument(
        "--drain-timeout",
        type=float,
        default=None,
        help="Seconds to wait for outstanding probes on shutdown",
    )
    parser.add_argument(
        "--no-redirects",
        action="store_true",
        help="Report redirect responses instead of following them",
    )
    parser.add_argument(
        "--text",
        action="store_true",
        help="Output human-friendly lines instead of JSON",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: $REACHPROBE_LOG_LEVEL or WARNING)")
    return parser


def settings_from_args(args: argparse.Namespace) -> ProbeSettings:
    settings = load_probe_settings()
    if args.interval_ms is not None:
        settings.interval = args.interval_ms / 1000
    if args.max_concurrency is not None:
        settings.max_concurrency = args.max_concurrency
    if args.drain_timeout is not None:
        settings.drain_timeout = args.drain_timeout
    if args.no_redirects:
        settings.allow_redirects = False
    return settings.validate()


async def run(service: Prober, stream: TextIO, *, text: bool = False) -> int:
    """Probe until SIGINT/SIGTERM, streaming results to ``stream``."""
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    installed: list[signal.Signals] = []
    for sig in _SHUTDOWN_SIGNALS:
        with suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, stop.set)
            installed.append(sig)

    async def close_on_signal() -> None:
        await stop.wait()
        logger.info("Exiting upon request...")
        await service.close()

    closer = asyncio.create_task(close_on_signal())
    service.start()
    try:
        await write_lines(service.results, stream, encode_text if text else encode_json)
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
        if not stop.is_set():
            closer.cancel()
        with suppress(asyncio.CancelledError):
            await closer
        await service.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = settings_from_args(args)
        service = ProbeService(args.urls, settings=settings)
    except ConfigError as exc:
        parser.error(str(exc))

    return asyncio.run(run(service, sys.stdout, text=args.text))


if __name__ == "__main__":
    raise SystemExit(main())
