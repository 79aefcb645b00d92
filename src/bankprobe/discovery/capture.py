# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Passive network capture.

The observer is the only writer of the run-scoped ``CaptureLog``; it appends while a
UI action is in flight. The prober reads ``snapshot()`` tuples after that action has
completed, so producer and consumer never run in the same step.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

from ..models.probe import CapturedCall

logger = logging.getLogger(__name__)

# URL fragments that mark a request as API-related on the banking site.
CAPTURE_KEYWORDS: tuple[str, ...] = (
    "/services/",
    "/api/",
    "transaction",
    "account",
    "billpay",
    "transfer",
)

# Static assets never carry query results.
_IGNORED_SUFFIXES = (".css", ".js", ".png", ".jpg", ".gif", ".svg", ".ico", ".woff", ".woff2")


class CaptureLog:
    """Append-only log of captured calls for one run."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._calls: list[CapturedCall] = []
        self._clock = clock

    def append(self, endpoint: str, method: str = "GET", payload: str | None = None) -> CapturedCall:
        call = CapturedCall(endpoint=endpoint, method=method.upper(), payload=payload, observed_at=self._clock())
        self._calls.append(call)
        return call

    def snapshot(self) -> tuple[CapturedCall, ...]:
        return tuple(self._calls)

    def clear(self) -> None:
        """Start a new run; called once at run start, never mid-run."""
        self._calls = []

    def __len__(self) -> int:
        return len(self._calls)

    def __iter__(self):
        return iter(self.snapshot())


def is_api_call(url: str, keywords: Iterable[str] = CAPTURE_KEYWORDS) -> bool:
    lowered = url.lower()
    path = lowered.split("?", 1)[0]
    if path.endswith(_IGNORED_SUFFIXES):
        return False
    return any(keyword in lowered for keyword in keywords)


class NetworkCaptureObserver:
    """
    Records API-looking requests issued by the browser into a CaptureLog.

    Attach it once per page; attaching the same page again is a no-op.
    """

    def __init__(self, log: CaptureLog, keywords: Iterable[str] = CAPTURE_KEYWORDS):
        self.log = log
        self.keywords = tuple(keywords)
        self._attached: list[Any] = []

    def on_request(self, url: str, method: str = "GET", payload: str | None = None) -> CapturedCall | None:
        if not is_api_call(url, self.keywords):
            return None
        call = self.log.append(url, method, payload)
        logger.debug("Captured %s %s", call.method, call.endpoint)
        return call

    def handle_request(self, request: Any) -> None:
        """Playwright ``request`` event handler."""
        try:
            payload = request.post_data
        except (UnicodeDecodeError, ValueError):
            payload = None
        self.on_request(request.url, request.method, payload)

    def attach(self, page: Any) -> bool:
        if any(existing is page for existing in self._attached):
            return False
        page.on("request", self.handle_request)
        self._attached.append(page)
        logger.info("Network capture attached")
        return True

    def detach(self, page: Any) -> None:
        for index, existing in enumerate(self._attached):
            if existing is page:
                page.remove_listener("request", self.handle_request)
                del self._attached[index]
                return


__all__ = ["CAPTURE_KEYWORDS", "CaptureLog", "NetworkCaptureObserver", "is_api_call"]
