# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level BankProbe facade for discovery and registration workflows."""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from contextlib import suppress
from typing import Any

from .config import (
    BrowserSettings,
    HttpSettings,
    RegistrationSettings,
    load_browser_settings,
    load_http_settings,
    load_registration_settings,
)
from .discovery.capture import CaptureLog, NetworkCaptureObserver
from .discovery.prober import Prober
from .discovery.queries import ACCOUNT_DETAILS, ACCOUNT_TRANSACTIONS, TRANSACTIONS_BY_AMOUNT, QueryKind
from .http.client import HttpClient, create_default_http_client
from .models import Identity, ProbeOutcome, RegistrationResult
from .registration.adapter import FieldActionAdapter
from .registration.controller import RetryController
from .registration.entropy import EntropySource
from .utils.context import probe_context


class BankProbe:
    """
    Wires one HTTP client, one capture log and the settings for a single run.

    The capture log lives exactly as long as this object; a new ``BankProbe`` (or
    ``reset_capture``) starts a new run.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        http_settings: HttpSettings | None = None,
        registration_settings: RegistrationSettings | None = None,
        browser_settings: BrowserSettings | None = None,
    ):
        self.http_settings = http_settings or load_http_settings()
        self.registration_settings = registration_settings or load_registration_settings()
        self.browser_settings = browser_settings or load_browser_settings()
        self.http_client = http_client or create_default_http_client(self.http_settings)
        self.capture_log = CaptureLog()
        self.observer = NetworkCaptureObserver(self.capture_log)
        self.prober = Prober(self.http_client, self.capture_log, self.http_settings)
        self.run_id = secrets.token_hex(4)

    def probe(self, query: str | QueryKind, params: Mapping[str, Any] | None = None, **kwargs: Any) -> ProbeOutcome:
        merged = dict(params or {})
        merged.update(kwargs)
        with probe_context(
            http_client=self.http_client,
            http_settings=self.http_settings,
            run_id=self.run_id,
        ):
            return self.prober.probe(query, merged)

    def find_transactions_by_amount(self, account_id: Any, amount: Any) -> ProbeOutcome:
        return self.probe(TRANSACTIONS_BY_AMOUNT, account_id=account_id, amount=amount)

    def get_transactions(self, account_id: Any) -> ProbeOutcome:
        return self.probe(ACCOUNT_TRANSACTIONS, account_id=account_id)

    def get_account_details(self, account_id: Any) -> ProbeOutcome:
        return self.probe(ACCOUNT_DETAILS, account_id=account_id)

    def register(
        self,
        adapter: FieldActionAdapter,
        identity: Identity | None = None,
        *,
        max_attempts: int | None = None,
        entropy: EntropySource | None = None,
    ) -> RegistrationResult:
        controller = RetryController(
            adapter,
            entropy=entropy or EntropySource(password=self.registration_settings.default_password),
            settings=self.registration_settings,
        )
        return controller.create_with_retry(identity, max_attempts=max_attempts)

    def browser(self):
        """Open a Playwright session whose traffic feeds this run's capture log."""
        from .browser.playwright_adapter import browser_session

        return browser_session(self.http_settings.base_url, self.browser_settings, self.observer)

    def reset_capture(self) -> None:
        self.capture_log.clear()

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> BankProbe:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["BankProbe"]
