# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Playwright-backed Field/Action adapter and browser session helper."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from urllib.parse import urljoin

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeout
from playwright.sync_api import sync_playwright

from ..config import BrowserSettings, load_browser_settings
from ..discovery.capture import NetworkCaptureObserver
from ..errors import AdapterError

logger = logging.getLogger(__name__)


class PlaywrightPageAdapter:
    """
    ``FieldActionAdapter`` on a synchronous Playwright ``Page``.

    Refs are CSS/Playwright selectors. Elements that never become visible are
    reported as ``False``; any other Playwright failure is raised as ``AdapterError``.
    """

    def __init__(self, page: Page, base_url: str, settings: BrowserSettings | None = None):
        self.page = page
        self.base_url = base_url.rstrip("/") + "/"
        self.settings = settings or load_browser_settings()

    def fill(self, ref: str, value: str) -> bool:
        try:
            self.page.wait_for_selector(ref, state="visible", timeout=self.settings.ui_timeout)
            self.page.fill(ref, value, timeout=self.settings.ui_timeout)
            actual = self.page.input_value(ref, timeout=self.settings.ui_timeout)
        except PlaywrightError as exc:
            logger.debug("fill via %s failed: %s", ref, exc)
            return False
        if actual != value:
            logger.debug("Value mismatch for %s: expected %r, got %r", ref, value, actual)
            return False
        return True

    def submit(self, ref: str) -> None:
        try:
            self.page.click(ref, timeout=self.settings.ui_timeout)
        except PlaywrightError as exc:
            raise AdapterError("submit", ref, str(exc)) from exc
        self._settle()

    def is_visible(self, ref: str) -> bool:
        try:
            self.page.wait_for_selector(ref, state="visible", timeout=self.settings.visibility_timeout)
        except PlaywrightTimeout:
            return False
        except PlaywrightError as exc:
            raise AdapterError("is_visible", ref, str(exc)) from exc
        return True

    def read_text(self, ref: str) -> str:
        try:
            text = self.page.text_content(ref, timeout=self.settings.visibility_timeout)
        except PlaywrightError as exc:
            raise AdapterError("read_text", ref, str(exc)) from exc
        return text or ""

    def current_location(self) -> str:
        return self.page.url

    def navigate(self, path: str) -> None:
        url = urljoin(self.base_url, path.lstrip("/"))
        try:
            self.page.goto(url, wait_until="domcontentloaded", timeout=self.settings.navigation_timeout)
        except PlaywrightError as exc:
            raise AdapterError("navigate", url, str(exc)) from exc
        self._settle()

    def _settle(self) -> None:
        # Pages with background polling never reach network idle; carry on regardless.
        try:
            self.page.wait_for_load_state("networkidle", timeout=self.settings.network_idle_timeout)
        except PlaywrightTimeout:
            logger.debug("Network did not go idle within %sms", self.settings.network_idle_timeout)


@contextmanager
def browser_session(
    base_url: str,
    settings: BrowserSettings | None = None,
    observer: NetworkCaptureObserver | None = None,
) -> Iterator[PlaywrightPageAdapter]:
    """Launch Chromium, open one page and yield an adapter bound to it."""
    settings = settings or load_browser_settings()
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=settings.headless, slow_mo=settings.slow_mo)
        try:
            context = browser.new_context(ignore_https_errors=True)
            page = context.new_page()
            page.set_default_timeout(settings.ui_timeout)
            page.set_default_navigation_timeout(settings.navigation_timeout)
            if observer is not None:
                observer.attach(page)
            logger.info("Browser session opened (headless=%s)", settings.headless)
            yield PlaywrightPageAdapter(page, base_url, settings)
        finally:
            browser.close()
            logger.info("Browser session closed")


__all__ = ["PlaywrightPageAdapter", "browser_session"]
