# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout

from bankprobe.browser.playwright_adapter import PlaywrightPageAdapter
from bankprobe.config import BrowserSettings
from bankprobe.errors import AdapterError


class FakePage:
    """Just enough of playwright's sync Page for the adapter."""

    def __init__(self, visible=(), texts=None, broken=(), sticky=()):
        self.visible = set(visible)
        self.texts = dict(texts or {})
        self.broken = set(broken)
        self.sticky = set(sticky)
        self.values = {}
        self.url = "about:blank"
        self.calls = []
        self.idle_times_out = False

    def wait_for_selector(self, selector, state="visible", timeout=None):
        self.calls.append(("wait", selector, timeout))
        if selector in self.broken:
            raise PlaywrightError(f"Unexpected token in selector {selector}")
        if selector not in self.visible:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded")

    def fill(self, selector, value, timeout=None):  # noqa: ARG002
        self.values[selector] = "" if selector in self.sticky else value

    def input_value(self, selector, timeout=None):  # noqa: ARG002
        return self.values.get(selector, "")

    def click(self, selector, timeout=None):  # noqa: ARG002
        if selector not in self.visible:
            raise PlaywrightTimeout("click timed out")
        self.calls.append(("click", selector))

    def text_content(self, selector, timeout=None):  # noqa: ARG002
        if selector not in self.texts:
            raise PlaywrightTimeout("no element")
        return self.texts[selector]

    def goto(self, url, wait_until=None, timeout=None):  # noqa: ARG002
        if "unreachable" in url:
            raise PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        self.url = url

    def wait_for_load_state(self, state, timeout=None):  # noqa: ARG002
        self.calls.append(("load_state", state))
        if self.idle_times_out:
            raise PlaywrightTimeout("network never idle")


SETTINGS = BrowserSettings(ui_timeout=1000, visibility_timeout=100, navigation_timeout=2000, network_idle_timeout=500)


def _adapter(page, base_url="https://bank.test/parabank"):
    return PlaywrightPageAdapter(page, base_url, SETTINGS)


def test_fill_verifies_value_was_set():
    page = FakePage(visible={"#a", "#sticky"}, sticky={"#sticky"})
    adapter = _adapter(page)

    assert adapter.fill("#a", "Ada") is True
    assert adapter.fill("#sticky", "Ada") is False
    assert adapter.fill("#missing", "Ada") is False


def test_is_visible_uses_visibility_timeout():
    page = FakePage(visible={"#shown"}, broken={"td:has-text(("})
    adapter = _adapter(page)

    assert adapter.is_visible("#shown") is True
    assert adapter.is_visible("#hidden") is False
    assert ("wait", "#hidden", 100) in page.calls
    with pytest.raises(AdapterError):
        adapter.is_visible("td:has-text((")


def test_submit_clicks_and_settles_even_without_idle():
    page = FakePage(visible={'input[value="Register"]'})
    page.idle_times_out = True
    adapter = _adapter(page)

    adapter.submit('input[value="Register"]')

    assert ("click", 'input[value="Register"]') in page.calls
    with pytest.raises(AdapterError) as excinfo:
        adapter.submit("#gone")
    assert excinfo.value.action == "submit"


def test_navigate_joins_base_url_and_wraps_errors():
    page = FakePage()
    adapter = _adapter(page)

    adapter.navigate("register.htm")
    assert adapter.current_location() == "https://bank.test/parabank/register.htm"
    adapter.navigate("/overview.htm")
    assert page.url == "https://bank.test/parabank/overview.htm"
    assert ("load_state", "networkidle") in page.calls

    with pytest.raises(AdapterError):
        _adapter(page, base_url="https://unreachable.test").navigate("register.htm")


def test_read_text_returns_text_or_raises():
    page = FakePage(texts={"#rightPanel h1": "Welcome usr1", "#empty": None})
    adapter = _adapter(page)

    assert adapter.read_text("#rightPanel h1") == "Welcome usr1"
    assert adapter.read_text("#empty") == ""
    with pytest.raises(AdapterError):
        adapter.read_text("#nothing")
