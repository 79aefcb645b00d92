# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Per-run ambient context.

This module provides a ContextVar-backed ProbeContext that carries common probe
plumbing (timeout, http client, settings). Helpers read from this context when
explicit arguments are omitted.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from ..config import HttpSettings, load_http_settings

if TYPE_CHECKING:
    from ..http.client import HttpClient


@dataclass(frozen=True)
class ProbeContext:
    timeout: float | None = None
    http_client: HttpClient | None = None
    http_settings: HttpSettings | None = None
    run_id: str | None = None


_current_probe_context: ContextVar[ProbeContext | None] = ContextVar("bankprobe_probe_context", default=None)


def get_probe_context() -> ProbeContext:
    """Return the current ambient probe context."""
    return _current_probe_context.get() or ProbeContext()


def get_http_settings() -> HttpSettings:
    """Return HttpSettings from context, falling back to loading defaults."""
    context = get_probe_context()
    if context.http_settings is not None:
        return context.http_settings
    return load_http_settings()


@contextmanager
def probe_context(**overrides) -> Iterator[ProbeContext]:
    """Temporarily layer overrides on top of the current context."""
    current = get_probe_context()
    updated = replace(current, **overrides)
    token = _current_probe_context.set(updated)
    try:
        yield updated
    finally:
        _current_probe_context.reset(token)


__all__ = ["ProbeContext", "get_http_settings", "get_probe_context", "probe_context"]
