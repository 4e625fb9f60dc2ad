# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe worker exports."""

from .worker import probe_url, result_from_response

__all__ = ["probe_url", "result_from_response"]
