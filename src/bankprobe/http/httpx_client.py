# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging
import time

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import categorize_exception
from ..utils.context import get_probe_context
from .client import HttpClient
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

# The target serves JSON only when asked for it; markup is the fallback.
DEFAULT_ACCEPT = "application/json, text/html;q=0.8, */*;q=0.5"
FALLBACK_MAX_BODY_BYTES = 4 * 1024 * 1024


def _read_capped(resp: httpx.Response, limit: int) -> tuple[bytes, bool]:
    """Read at most ``limit`` bytes of a streamed body; report whether it was cut."""
    content = bytearray()
    for chunk in resp.iter_bytes():
        if not chunk:
            continue
        remaining = limit - len(content)
        if len(chunk) > remaining:
            content.extend(chunk[: max(remaining, 0)])
            return bytes(content), True
        content.extend(chunk)
    return bytes(content), False


def _decode(content: bytes, encoding: str | None) -> str:
    try:
        return content.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


class HttpxClient(HttpClient):
    """
    Synchronous httpx client wrapper.

    Bodies are streamed and capped at ``max_body_bytes``. Transport failures never
    raise: they come back as ``HttpResponse(ok=False)`` carrying the exception class
    name and its ``ErrorCategory`` in ``meta``.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            transport=transport,
        )

    def _timeout_for(self, request: HttpRequest) -> float:
        if request.timeout is not None:
            return request.timeout
        context_timeout = get_probe_context().timeout
        return context_timeout if context_timeout is not None else self.settings.timeout

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        headers.setdefault("Accept", DEFAULT_ACCEPT)
        limit = self.settings.max_body_bytes if self.settings.max_body_bytes > 0 else FALLBACK_MAX_BODY_BYTES
        started = time.monotonic()

        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=self._timeout_for(request),
                follow_redirects=request.allow_redirects,
            ) as resp:
                content, truncated = _read_capped(resp, limit)
                text = _decode(content, resp.encoding)
        except Exception as exc:  # noqa: BLE001
            logger.debug("%s %s failed: %s", request.method, request.url, exc)
            return HttpResponse(
                ok=False,
                url=request.url,
                error_message=str(exc),
                error_type=type(exc).__name__,
                meta={"error_category": categorize_exception(exc).value},
            )

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.debug("%s %s -> %s in %dms", request.method, request.url, resp.status_code, elapsed_ms)
        return HttpResponse(
            ok=True,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            text=text,
            content=content,
            url=str(resp.url),
            meta={
                "body_truncated": truncated,
                "body_bytes_read": len(content),
                "elapsed_ms": elapsed_ms,
            },
        )

    def close(self) -> None:
        self._client.close()
