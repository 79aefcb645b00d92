# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
BankProbe package entrypoint.

BankProbe verifies online-banking workflows end to end. Endpoint discovery probes
observed network calls before static fallbacks and validates the first usable
answer; user registration is retried through a UI adapter until a success signal
is seen. HTTP behavior is abstracted behind an injectable client interface, and
domain objects are modeled with frozen dataclasses.
"""

from .config import (
    BrowserSettings,
    HttpSettings,
    RegistrationSettings,
    load_browser_settings,
    load_http_settings,
    load_registration_settings,
)
from .discovery import CaptureLog, NetworkCaptureObserver, Prober, QueryKind, get_query
from .errors import AdapterError, BankProbeError, RegistrationError, ScenarioTimeout
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RetryConfig,
    create_default_http_client,
)
from .log import setup_logging
from .models import (
    CheckStatus,
    FieldCheck,
    Identity,
    NotFound,
    ProbeHit,
    RegistrationAttempt,
    RegistrationFailure,
    RegistrationSuccess,
    ResponseShape,
    ResponseVerdict,
)
from .registration import EntropySource, FieldActionAdapter, RetryController
from .runtime import BankProbe
from .validation import classify
from .version import __version__

__all__ = [
    "AdapterError",
    "BankProbe",
    "BankProbeError",
    "BrowserSettings",
    "CaptureLog",
    "CheckStatus",
    "EntropySource",
    "FieldActionAdapter",
    "FieldCheck",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "Identity",
    "NetworkCaptureObserver",
    "NotFound",
    "ProbeHit",
    "Prober",
    "QueryKind",
    "RegistrationAttempt",
    "RegistrationError",
    "RegistrationFailure",
    "RegistrationSettings",
    "RegistrationSuccess",
    "ResponseShape",
    "ResponseVerdict",
    "RetryConfig",
    "RetryController",
    "ScenarioTimeout",
    "classify",
    "create_default_http_client",
    "get_query",
    "load_browser_settings",
    "load_http_settings",
    "load_registration_settings",
    "setup_logging",
    "__version__",
]
