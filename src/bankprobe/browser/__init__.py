# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Browser integration (Playwright)."""

from .playwright_adapter import PlaywrightPageAdapter, browser_session

__all__ = ["PlaywrightPageAdapter", "browser_session"]
