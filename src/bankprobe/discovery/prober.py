# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Candidate prober: walks a query's candidates until one yields assertable data."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from ..config import HttpSettings
from ..errors import ErrorCategory, categorize_error_type, error_category_to_reason
from ..http import HttpRequest, HttpResponse, RetryConfig, media_type, normalize_headers, send_with_retries
from ..http.client import HttpClient, create_default_http_client
from ..models.probe import CandidateFailure, NotFound, ProbeCandidate, ProbeHit, ProbeOutcome
from ..utils.context import get_http_settings, get_probe_context
from ..validation.classifier import classify, classify_markup
from ..validation.schemas import ExpectationSchema
from .capture import CaptureLog
from .matching import filter_by_amount
from .queries import QueryKind, build_candidates, get_query

logger = logging.getLogger(__name__)

_UNPARSED = object()


def decode_structured(response: HttpResponse) -> Any:
    """Decoded JSON body, or the ``_UNPARSED`` sentinel when the body is not JSON."""
    text = (response.text or "").strip()
    if not text:
        return _UNPARSED
    try:
        return json.loads(text)
    except ValueError:
        return _UNPARSED


def _payload_headers(payload: str | None) -> dict[str, str]:
    if not payload:
        return {}
    if payload.lstrip().startswith(("{", "[")):
        return {"Content-Type": "application/json"}
    return {"Content-Type": "application/x-www-form-urlencoded"}


class Prober:
    """
    Sequential, first-success-wins prober.

    Candidates are never issued in parallel: the target is a live system and the
    first usable answer ends the search.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        capture_log: CaptureLog | None = None,
        settings: HttpSettings | None = None,
        retry_config: RetryConfig | None = None,
    ):
        self.settings = settings or get_http_settings()
        self.http_client = http_client or create_default_http_client(self.settings)
        self.capture_log = capture_log if capture_log is not None else CaptureLog()
        self.retry_config = retry_config or RetryConfig.from_settings(self.settings)

    def candidates(self, query: str | QueryKind, params: Mapping[str, Any]) -> list[ProbeCandidate]:
        kind = get_query(query)
        return build_candidates(kind, self.capture_log.snapshot(), params)

    def probe(
        self,
        query: str | QueryKind,
        params: Mapping[str, Any],
        *,
        schema: ExpectationSchema | None = None,
    ) -> ProbeOutcome:
        kind = get_query(query)
        kind.validate_params(params)
        schema = schema or kind.schema
        candidates = build_candidates(kind, self.capture_log.snapshot(), params)
        logger.info("Probing %s with %d candidate(s)", kind.name, len(candidates))

        failures: list[CandidateFailure] = []
        for candidate in candidates:
            url = candidate.url(self.settings.base_url)
            response = self._issue(candidate, url)

            if not response.ok:
                category = categorize_error_type(response.error_type)
                if category is ErrorCategory.NONE:
                    category = ErrorCategory.UNKNOWN_ERROR
                logger.debug("Candidate %s failed: %s (%s)", url, response.error_message, response.error_type)
                failures.append(
                    CandidateFailure(
                        candidate=candidate,
                        error_category=category.value,
                        reason=response.error_message or error_category_to_reason(category),
                    )
                )
                continue

            if not response.is_success:
                snippet = response.body_snippet
                logger.debug("Candidate %s answered HTTP %s", url, response.status_code)
                failures.append(
                    CandidateFailure(
                        candidate=candidate,
                        status_code=response.status_code,
                        error_category=ErrorCategory.HTTP_STATUS.value,
                        reason=f"HTTP {response.status_code}: {snippet}" if snippet else f"HTTP {response.status_code}",
                    )
                )
                continue

            return self._hit(kind, candidate, url, response, params, schema, failures)

        logger.info("No candidate returned assertable data for %s", kind.name)
        return NotFound(query=kind.name, attempted=tuple(candidates), failures=tuple(failures))

    def _issue(self, candidate: ProbeCandidate, url: str) -> HttpResponse:
        context_timeout = get_probe_context().timeout
        request = HttpRequest(
            url=url,
            method=candidate.method,
            headers=_payload_headers(candidate.payload),
            body=candidate.payload if candidate.method != "GET" else None,
            timeout=context_timeout if context_timeout is not None else self.settings.timeout,
            allow_redirects=self.settings.allow_redirects,
        )
        logger.debug("Trying %s", candidate.describe())
        return send_with_retries(self.http_client, request, retry_config=self.retry_config)

    def _hit(
        self,
        kind: QueryKind,
        candidate: ProbeCandidate,
        url: str,
        response: HttpResponse,
        params: Mapping[str, Any],
        schema: ExpectationSchema,
        failures: list[CandidateFailure],
    ) -> ProbeHit:
        data = decode_structured(response)
        matches: tuple[Any, ...] | None = None

        if data is _UNPARSED:
            logger.debug("%s is not structured (%s); classifying markup", url, media_type(response.headers) or "no content-type")
            verdict = classify_markup(response.text, kind.references(params))
            data = None
        else:
            verdict = classify(data, schema)
            if kind.match_param and isinstance(data, list):
                matches = tuple(filter_by_amount(data, params.get(kind.match_param)))
                logger.info("%d record(s) match %s=%s", len(matches), kind.match_param, params.get(kind.match_param))

        logger.info(
            "%s answered by %s: %s %s",
            kind.name,
            candidate.describe(),
            verdict.shape.value,
            verdict.summary.to_dict(),
        )
        return ProbeHit(
            query=kind.name,
            verdict=verdict,
            candidate=candidate,
            url=url,
            status_code=int(response.status_code or 0),
            headers=normalize_headers(response.headers),
            data=data,
            matches=matches,
            failures=tuple(failures),
        )


__all__ = ["Prober", "decode_structured"]
