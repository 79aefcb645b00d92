# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Field/Action adapter capability consumed by the registration workflow."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FieldActionAdapter(Protocol):
    """
    UI capability the retry controller drives.

    ``ref`` values are opaque to the controller; an implementation decides what they
    mean (CSS selectors for the Playwright adapter). ``fill`` and ``is_visible``
    report a missing element by returning ``False``; anything the adapter cannot
    recover from is raised as ``AdapterError``.
    """

    def fill(self, ref: str, value: str) -> bool: ...

    def submit(self, ref: str) -> None: ...

    def is_visible(self, ref: str) -> bool: ...

    def read_text(self, ref: str) -> str: ...

    def current_location(self) -> str: ...

    def navigate(self, path: str) -> None: ...


__all__ = ["FieldActionAdapter"]
