# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import logging
import socket

import httpx
import pytest

from reachprobe import config, log
from reachprobe.errors import (
    ConfigError,
    ErrorCategory,
    categorize_exception,
    describe_exception,
    error_category_to_reason,
)


def test_probe_settings_defaults():
    settings = config.ProbeSettings()
    assert settings.interval == 3.0
    assert settings.drain_timeout == 1.0
    assert settings.max_concurrency == 100
    assert settings.allow_redirects is True


def test_probe_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("REACHPROBE_INTERVAL_MS", "250")
    monkeypatch.setenv("REACHPROBE_DRAIN_TIMEOUT", "0.5")
    monkeypatch.setenv("REACHPROBE_MAX_CONCURRENCY", "8")
    monkeypatch.setenv("REACHPROBE_HTTP_REDIRECTS", "false")

    settings = config.load_probe_settings()

    assert settings.interval == 0.25
    assert settings.drain_timeout == 0.5
    assert settings.max_concurrency == 8
    assert settings.allow_redirects is False


def test_probe_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("REACHPROBE_INTERVAL_MS", "not-a-number")
    monkeypatch.setenv("REACHPROBE_DRAIN_TIMEOUT", "-3")
    monkeypatch.setenv("REACHPROBE_MAX_CONCURRENCY", "many")

    settings = config.load_probe_settings()

    assert settings.interval == config.ProbeSettings.interval
    assert settings.drain_timeout == config.ProbeSettings.drain_timeout
    assert settings.max_concurrency == config.ProbeSettings.max_concurrency


def test_probe_settings_non_positive_values(monkeypatch):
    monkeypatch.setenv("REACHPROBE_INTERVAL_MS", "0")
    monkeypatch.setenv("REACHPROBE_MAX_CONCURRENCY", "0")

    settings = config.load_probe_settings()

    assert settings.interval == config.DEFAULT_INTERVAL_MS / 1000
    assert settings.max_concurrency is None


def test_load_probe_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("REACHPROBE_INTERVAL_MS", "100")
    assert config.load_probe_settings().interval == 0.1
    monkeypatch.setenv("REACHPROBE_INTERVAL_MS", "200")
    assert config.load_probe_settings().interval == 0.2


def test_validate_rejects_bad_values():
    with pytest.raises(ConfigError):
        config.ProbeSettings(interval=0).validate()
    with pytest.raises(ConfigError):
        config.ProbeSettings(drain_timeout=-1).validate()
    assert config.ProbeSettings(max_concurrency=0).validate().max_concurrency is None


@pytest.mark.parametrize(
    ("exc", "category"),
    [
        (httpx.InvalidURL("Invalid port: 'x'"), ErrorCategory.INVALID_REQUEST),
        (httpx.UnsupportedProtocol("missing scheme"), ErrorCategory.INVALID_REQUEST),
        (httpx.ConnectTimeout("slow"), ErrorCategory.TIMEOUT),
        (TimeoutError(), ErrorCategory.TIMEOUT),
        (asyncio.CancelledError(), ErrorCategory.CANCELLED),
        (httpx.ConnectError("refused"), ErrorCategory.CONNECTION_ERROR),
        (httpx.RemoteProtocolError("bad"), ErrorCategory.CONNECTION_ERROR),
        (ConnectionResetError(), ErrorCategory.CONNECTION_ERROR),
        (socket.gaierror(-2, "Name or service not known"), ErrorCategory.DNS_ERROR),
        (RuntimeError("boom"), ErrorCategory.UNKNOWN_ERROR),
    ],
)
def test_categorize_exception(exc, category):
    assert categorize_exception(exc) is category


def test_categorize_exception_follows_cause_chain_for_dns():
    try:
        try:
            raise socket.gaierror(-2, "Name or service not known")
        except socket.gaierror as inner:
            raise httpx.ConnectError("[Errno -2] Name or service not known") from inner
    except httpx.ConnectError as exc:
        assert categorize_exception(exc) is ErrorCategory.DNS_ERROR


def test_describe_exception_and_reasons():
    assert describe_exception(RuntimeError("boom")) == "RuntimeError: boom"
    assert describe_exception(TimeoutError()) == "TimeoutError"
    assert error_category_to_reason(ErrorCategory.TIMEOUT) == "Probe deadline exceeded"
    assert error_category_to_reason(ErrorCategory.NONE) == ""
    assert error_category_to_reason(None) == ""


def test_log_level_env_is_read_at_call_time(monkeypatch):
    calls = []
    monkeypatch.setattr(log.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    monkeypatch.setenv("REACHPROBE_LOG_LEVEL", "debug")
    log.setup_logging()
    monkeypatch.setenv("REACHPROBE_LOG_LEVEL", "error")
    log.setup_logging()
    log.setup_logging("info")

    assert [call["level"] for call in calls] == [logging.DEBUG, logging.ERROR, logging.INFO]
    assert logging.getLogger("httpx").level == logging.WARNING


def test_unknown_log_level_falls_back_to_warning(monkeypatch):
    monkeypatch.delenv("REACHPROBE_LOG_LEVEL", raising=False)
    assert log.resolve_log_level() == logging.WARNING
    assert log.resolve_log_level("chatty") == logging.WARNING
    assert log.resolve_log_level(" Debug ") == logging.DEBUG
