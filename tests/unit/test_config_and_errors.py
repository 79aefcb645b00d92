# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket
import ssl

import httpx
import pytest

from bankprobe import config
from bankprobe.config import DEFAULT_BASE_URL, DEFAULT_PASSWORD, DEFAULT_USER_AGENT
from bankprobe.errors import (
    AdapterError,
    ErrorCategory,
    RegistrationError,
    ScenarioTimeout,
    categorize_error_type,
    categorize_exception,
    error_category_to_reason,
)


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("BANKPROBE_BASE_URL", "http://bank.local/parabank/")
    monkeypatch.setenv("BANKPROBE_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("BANKPROBE_HTTP_RETRIES", "3")
    monkeypatch.setenv("BANKPROBE_HTTP_BACKOFF", "1.5")
    monkeypatch.setenv("BANKPROBE_HTTP_INITIAL_DELAY", "0.1")
    monkeypatch.setenv("BANKPROBE_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("BANKPROBE_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("BANKPROBE_HTTP_VERIFY_SSL", "0")

    settings = config.load_http_settings()

    assert settings.base_url == "http://bank.local/parabank"
    assert settings.timeout == 5.5
    assert settings.max_retries == 3
    assert settings.backoff_factor == 1.5
    assert settings.initial_delay == 0.1
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False


def test_http_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("BANKPROBE_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("BANKPROBE_HTTP_RETRIES", "ten")
    monkeypatch.setenv("BANKPROBE_HTTP_BACKOFF", "")
    monkeypatch.setenv("BANKPROBE_HTTP_MAX_BODY_BYTES", "-1")
    monkeypatch.delenv("BANKPROBE_BASE_URL", raising=False)
    monkeypatch.delenv("BANKPROBE_USER_AGENT", raising=False)

    settings = config.load_http_settings()

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout == config.HttpSettings.timeout
    assert settings.max_retries == config.HttpSettings.max_retries
    assert settings.backoff_factor == config.HttpSettings.backoff_factor
    assert settings.max_body_bytes == config.HttpSettings.max_body_bytes
    assert DEFAULT_USER_AGENT in settings.user_agent


def test_load_http_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("BANKPROBE_HTTP_TIMEOUT", "7.7")
    assert config.load_http_settings().timeout == 7.7
    monkeypatch.setenv("BANKPROBE_HTTP_TIMEOUT", "8.8")
    assert config.load_http_settings().timeout == 8.8


def test_registration_settings_defaults(monkeypatch):
    for name in (
        "BANKPROBE_REGISTER_MAX_ATTEMPTS",
        "BANKPROBE_REGISTER_PAUSE",
        "BANKPROBE_REGISTER_ERROR_PAUSE",
        "BANKPROBE_SCENARIO_TIMEOUT",
        "BANKPROBE_DEFAULT_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = config.load_registration_settings()

    assert settings.max_attempts == 10
    assert settings.pause == 1.0
    assert settings.error_pause == 2.0
    assert settings.scenario_timeout is None
    assert settings.default_password == DEFAULT_PASSWORD


def test_registration_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("BANKPROBE_REGISTER_MAX_ATTEMPTS", "4")
    monkeypatch.setenv("BANKPROBE_REGISTER_PAUSE", "0")
    monkeypatch.setenv("BANKPROBE_SCENARIO_TIMEOUT", "90")
    monkeypatch.setenv("BANKPROBE_DEFAULT_PASSWORD", "Secret99!")

    settings = config.load_registration_settings()

    assert settings.max_attempts == 4
    assert settings.pause == 0.0
    assert settings.scenario_timeout == 90.0
    assert settings.default_password == "Secret99!"


def test_registration_settings_reject_non_positive_cap(monkeypatch):
    monkeypatch.setenv("BANKPROBE_REGISTER_MAX_ATTEMPTS", "0")
    assert config.load_registration_settings().max_attempts == 10


def test_browser_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("BANKPROBE_HEADLESS", "no")
    monkeypatch.setenv("BANKPROBE_SLOW_MO", "250")
    monkeypatch.setenv("BANKPROBE_VISIBILITY_TIMEOUT", "1500")

    settings = config.load_browser_settings()

    assert settings.headless is False
    assert settings.slow_mo == 250
    assert settings.visibility_timeout == 1500
    assert settings.navigation_timeout == config.BrowserSettings.navigation_timeout


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (httpx.ReadTimeout("slow"), ErrorCategory.TIMEOUT),
        (httpx.ConnectError("refused"), ErrorCategory.CONNECTION_ERROR),
        (ssl.SSLError("bad cert"), ErrorCategory.SSL_ERROR),
        (socket.gaierror("no such host"), ErrorCategory.DNS_ERROR),
        (TimeoutError("builtin"), ErrorCategory.TIMEOUT),
        (ScenarioTimeout("fill", 30.0), ErrorCategory.TIMEOUT),
        (RuntimeError("weird"), ErrorCategory.UNKNOWN_ERROR),
    ],
)
def test_categorize_exception(exc, expected):
    assert categorize_exception(exc) is expected


def test_categorize_exception_recognizes_foreign_timeout_by_name():
    class TimeoutError(Exception):  # noqa: A001 - mirrors Playwright's class name
        pass

    assert categorize_exception(TimeoutError("page")) is ErrorCategory.TIMEOUT


def test_categorize_error_type_from_class_names():
    assert categorize_error_type(None) is ErrorCategory.NONE
    assert categorize_error_type("ReadTimeout") is ErrorCategory.TIMEOUT
    assert categorize_error_type("SSLCertVerificationError") is ErrorCategory.SSL_ERROR
    assert categorize_error_type("ConnectError") is ErrorCategory.CONNECTION_ERROR
    assert categorize_error_type("gaierror") is ErrorCategory.DNS_ERROR
    assert categorize_error_type("KeyError") is ErrorCategory.UNKNOWN_ERROR
    assert error_category_to_reason(ErrorCategory.NONE) == ""
    assert "DNS" in error_category_to_reason(ErrorCategory.DNS_ERROR)


def test_error_messages_are_readable():
    assert str(AdapterError("fill", "#customer\\.ssn", "detached")) == "fill failed for #customer\\.ssn: detached"
    assert str(AdapterError("submit", None, "no control")) == "submit failed: no control"
    assert "30.0s" in str(ScenarioTimeout("navigate", 30.0))

    error = RegistrationError("conflict exhausted", 10, "conflict")
    assert error.reason == "conflict exhausted"
    assert error.last_attempt_number == 10
    assert str(error) == "conflict exhausted after attempt 10 (last signal: conflict)"


def test_setup_logging_quiets_transport_loggers():
    import logging

    from bankprobe.log import setup_logging

    assert setup_logging("info") == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING
