# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    HTTP_STATUS = "HTTP_STATUS"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class BankProbeError(Exception):
    """Base class for errors raised by BankProbe."""


class AdapterError(BankProbeError):
    """A UI action could not be carried out by the Field/Action adapter."""

    def __init__(self, action: str, ref: str | None, message: str):
        super().__init__(message)
        self.action = action
        self.ref = ref
        self.message = message

    def __str__(self) -> str:
        if self.ref:
            return f"{self.action} failed for {self.ref}: {self.message}"
        return f"{self.action} failed: {self.message}"


class ScenarioTimeout(AdapterError):
    """The externally imposed scenario deadline expired before a step could run."""

    def __init__(self, step: str, budget: float):
        super().__init__(step, None, f"scenario timeout of {budget:.1f}s exceeded")
        self.budget = budget


class RegistrationError(BankProbeError):
    """Raised on demand when a registration run ended in failure."""

    def __init__(self, reason: str, last_attempt_number: int, last_signal: str | None):
        detail = f"{reason} after attempt {last_attempt_number}"
        if last_signal:
            detail = f"{detail} (last signal: {last_signal})"
        super().__init__(detail)
        self.reason = reason
        self.last_attempt_number = last_attempt_number
        self.last_signal = last_signal


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx/Playwright exceptions to ErrorCategory.
    """
    import socket
    import ssl as ssl_module

    import httpx

    if isinstance(exc, ScenarioTimeout):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, TimeoutError):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    # Playwright's TimeoutError does not subclass the builtin one.
    if type(exc).__name__ == "TimeoutError":
        return ErrorCategory.TIMEOUT

    return ErrorCategory.UNKNOWN_ERROR


def categorize_error_type(error_type: str | None) -> ErrorCategory:
    """Categorize from the exception class name carried by an HttpResponse."""
    if not error_type:
        return ErrorCategory.NONE
    name = error_type.lower()
    if "timeout" in name:
        return ErrorCategory.TIMEOUT
    if "ssl" in name or "certificate" in name:
        return ErrorCategory.SSL_ERROR
    if "gaierror" in name or "herror" in name:
        return ErrorCategory.DNS_ERROR
    if "connect" in name or "network" in name or "protocol" in name:
        return ErrorCategory.CONNECTION_ERROR
    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Timed out waiting for the target",
        ErrorCategory.HTTP_STATUS: "Target answered with a non-success status",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Unexpected error during probe",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed due to an unexpected error")
