# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Post-submit signal detection.

Detectors run in pipeline order and the first one that reports evidence decides the
signal. The default order puts conflict ahead of password errors ahead of success,
so a page that shows both an error and a navigation link is never read as a success.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..errors import AdapterError
from ..models.registration import SubmissionSignal
from .adapter import FieldActionAdapter

logger = logging.getLogger(__name__)

CONFLICT_REFS: tuple[str, ...] = (
    'td:has-text("This username already exists")',
    'span:has-text("This username already exists")',
    '.error:has-text("username")',
    '*:has-text("username already exists")',
)

PASSWORD_ERROR_REFS: tuple[str, ...] = (
    'td:has-text("Password is required")',
    'td:has-text("Password confirmation is required")',
    'span:has-text("Password")',
    '.error:has-text("password")',
)

SUCCESS_URL_FRAGMENTS: tuple[str, ...] = ("overview", "account", "welcome")

SUCCESS_TEXT_REFS: tuple[str, ...] = (
    "#rightPanel h1",
    ".title",
    'h1:has-text("Welcome")',
    "text=Welcome",
    '*:has-text("successfully")',
    '*:has-text("created")',
)
SUCCESS_KEYWORDS: tuple[str, ...] = ("welcome", "successfully", "created")

ACCOUNT_NAV_REFS: tuple[str, ...] = (
    'a[href*="overview"]',
    'a[href*="transfer"]',
    'a[href*="billpay"]',
    'a:has-text("Accounts Overview")',
    'a:has-text("Transfer Funds")',
)


def first_visible(adapter: FieldActionAdapter, refs: Iterable[str]) -> str | None:
    for ref in refs:
        if adapter.is_visible(ref):
            return ref
    return None


def detect_conflict(adapter: FieldActionAdapter) -> str | None:
    return first_visible(adapter, CONFLICT_REFS)


def detect_password_error(adapter: FieldActionAdapter) -> str | None:
    return first_visible(adapter, PASSWORD_ERROR_REFS)


def detect_success_location(adapter: FieldActionAdapter) -> str | None:
    location = adapter.current_location()
    lowered = location.lower()
    if any(fragment in lowered for fragment in SUCCESS_URL_FRAGMENTS):
        return location
    return None


def detect_success_text(adapter: FieldActionAdapter) -> str | None:
    for ref in SUCCESS_TEXT_REFS:
        if not adapter.is_visible(ref):
            continue
        try:
            text = adapter.read_text(ref)
        except AdapterError as exc:
            logger.debug("Could not read %s: %s", ref, exc)
            continue
        lowered = text.lower()
        if any(keyword in lowered for keyword in SUCCESS_KEYWORDS):
            return f"{ref}: {text.strip()}"
    return None


def detect_account_navigation(adapter: FieldActionAdapter) -> str | None:
    return first_visible(adapter, ACCOUNT_NAV_REFS)


@dataclass(frozen=True)
class SignalDetector:
    name: str
    signal: SubmissionSignal
    detect: Callable[[FieldActionAdapter], str | None]


SIGNAL_PIPELINE: tuple[SignalDetector, ...] = (
    SignalDetector("username conflict", SubmissionSignal.CONFLICT, detect_conflict),
    SignalDetector("password error", SubmissionSignal.PASSWORD_ERROR, detect_password_error),
    SignalDetector("success location", SubmissionSignal.SUCCESS, detect_success_location),
    SignalDetector("success text", SubmissionSignal.SUCCESS, detect_success_text),
    SignalDetector("account navigation", SubmissionSignal.SUCCESS, detect_account_navigation),
)


def evaluate_submission(
    adapter: FieldActionAdapter,
    pipeline: Iterable[SignalDetector] = SIGNAL_PIPELINE,
) -> tuple[SubmissionSignal, str | None]:
    """Return the first detected signal and its evidence, or ``UNDETERMINED``."""
    for detector in pipeline:
        evidence = detector.detect(adapter)
        if evidence is not None:
            logger.debug("Detected %s via %s", detector.name, evidence)
            return detector.signal, evidence
    return SubmissionSignal.UNDETERMINED, None


__all__ = [
    "ACCOUNT_NAV_REFS",
    "CONFLICT_REFS",
    "PASSWORD_ERROR_REFS",
    "SIGNAL_PIPELINE",
    "SUCCESS_KEYWORDS",
    "SUCCESS_TEXT_REFS",
    "SUCCESS_URL_FRAGMENTS",
    "SignalDetector",
    "evaluate_submission",
    "first_visible",
]
