# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for BankProbe."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_BASE_URL = "https://parabank.parasoft.com/parabank"
DEFAULT_USER_AGENT = f"BankProbe/{__version__} (banking workflow verifier)"
DEFAULT_PASSWORD = "TestPass123!"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = float(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass
class HttpSettings:
    """HTTP client defaults used by the prober."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 10.0
    max_retries: int = 1
    backoff_factor: float = 2.0
    initial_delay: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 4 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("BANKPROBE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            base_url=os.getenv("BANKPROBE_BASE_URL", cls.base_url).rstrip("/"),
            timeout=_float_env("BANKPROBE_HTTP_TIMEOUT", cls.timeout),
            max_retries=_int_env("BANKPROBE_HTTP_RETRIES", cls.max_retries),
            backoff_factor=_float_env("BANKPROBE_HTTP_BACKOFF", cls.backoff_factor),
            initial_delay=_float_env("BANKPROBE_HTTP_INITIAL_DELAY", cls.initial_delay),
            user_agent=os.getenv("BANKPROBE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("BANKPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("BANKPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class RegistrationSettings:
    """Retry policy for the registration workflow."""

    max_attempts: int = 10
    pause: float = 1.0
    error_pause: float = 2.0
    scenario_timeout: float | None = None
    default_password: str = DEFAULT_PASSWORD

    @classmethod
    def from_env(cls) -> "RegistrationSettings":
        max_attempts = _int_env("BANKPROBE_REGISTER_MAX_ATTEMPTS", cls.max_attempts)
        if max_attempts <= 0:
            max_attempts = cls.max_attempts
        return cls(
            max_attempts=max_attempts,
            pause=_float_env("BANKPROBE_REGISTER_PAUSE", cls.pause),
            error_pause=_float_env("BANKPROBE_REGISTER_ERROR_PAUSE", cls.error_pause),
            scenario_timeout=_optional_float_env("BANKPROBE_SCENARIO_TIMEOUT", cls.scenario_timeout),
            default_password=os.getenv("BANKPROBE_DEFAULT_PASSWORD", cls.default_password),
        )


@dataclass
class BrowserSettings:
    """Playwright launch and wait bounds (milliseconds, as Playwright expects)."""

    headless: bool = True
    slow_mo: int = 0
    ui_timeout: int = 10_000
    visibility_timeout: int = 3_000
    navigation_timeout: int = 60_000
    network_idle_timeout: int = 30_000

    @classmethod
    def from_env(cls) -> "BrowserSettings":
        return cls(
            headless=_bool_env("BANKPROBE_HEADLESS", cls.headless),
            slow_mo=_int_env("BANKPROBE_SLOW_MO", cls.slow_mo),
            ui_timeout=_int_env("BANKPROBE_UI_TIMEOUT", cls.ui_timeout),
            visibility_timeout=_int_env("BANKPROBE_VISIBILITY_TIMEOUT", cls.visibility_timeout),
            navigation_timeout=_int_env("BANKPROBE_NAVIGATION_TIMEOUT", cls.navigation_timeout),
            network_idle_timeout=_int_env("BANKPROBE_NETWORK_IDLE_TIMEOUT", cls.network_idle_timeout),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_registration_settings() -> RegistrationSettings:
    return RegistrationSettings.from_env()


def load_browser_settings() -> BrowserSettings:
    return BrowserSettings.from_env()
