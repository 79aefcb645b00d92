# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction and factory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse

if TYPE_CHECKING:
    import httpx


class HttpClient(Protocol):
    """
    Network capability used by the prober.

    ``request`` must not raise for transport problems; it reports them through
    ``HttpResponse.ok``.
    """

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_http_client(
    settings: HttpSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> HttpClient:
    """Factory for the default httpx-backed client; ``transport`` swaps the wire (e.g. ``httpx.MockTransport``)."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_http_settings(), transport=transport)
