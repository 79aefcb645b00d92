# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport-level retries for a single probe request."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..errors import categorize_exception
from ..utils.context import get_http_settings
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)

MAX_RETRY_DELAY = 30.0


def build_default_retry_config() -> RetryConfig:
    """Create a RetryConfig from the ambient (or environment-backed) HttpSettings."""
    return RetryConfig.from_settings(get_http_settings())


def _attempt(client: HttpClient, request: HttpRequest) -> HttpResponse:
    try:
        return client.request(request)
    except Exception as exc:  # noqa: BLE001
        return HttpResponse(
            ok=False,
            url=request.url,
            error_message=str(exc),
            error_type=type(exc).__name__,
            meta={"error_category": categorize_exception(exc).value},
        )


def _answered(response: HttpResponse) -> bool:
    return response.ok or response.status_code is not None


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
    sleep: Callable[[float], None] | None = None,
) -> HttpResponse:
    """
    Send ``request`` and retry while the target gives no answer at all.

    An HTTP error status is an answer and is returned as-is; only transport failures
    (no status code) are retried, with exponential backoff capped at ``MAX_RETRY_DELAY``.
    The returned response records ``retry_count`` and, when every attempt failed,
    ``retry_exhausted``.
    """
    cfg = retry_config or build_default_retry_config()
    pause = sleep or time.sleep
    attempts = max(1, cfg.max_attempts)
    delay = cfg.initial_delay

    response = _attempt(client, request)
    for retry in range(1, attempts):
        if _answered(response):
            break
        logger.debug("retry %d/%d for %s after %s", retry, attempts - 1, request.url, response.error_type)
        pause(min(delay, MAX_RETRY_DELAY))
        delay *= cfg.backoff_factor
        response = _attempt(client, request)
        response.meta["retry_count"] = retry

    if not _answered(response):
        response.meta.setdefault("retry_count", attempts - 1)
        response.meta["retry_exhausted"] = True
    return response
