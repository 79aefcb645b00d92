# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe candidate, captured call and probe result models."""

from __future__ import annotations

import string
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote

from .verdict import ResponseVerdict


class CandidateSource(str, Enum):
    CAPTURED = "captured"
    STATIC = "static"


@dataclass(frozen=True)
class CapturedCall:
    """A network call observed passively while the UI was being driven."""

    endpoint: str
    method: str = "GET"
    payload: str | None = None
    observed_at: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ProbeCandidate:
    """
    One hypothesized way to reach a query result.

    ``path`` is either an absolute URL (observed calls) or a ``str.format`` style template
    relative to the target base URL, e.g. ``/services/bank/accounts/{account_id}``.
    """

    method: str
    path: str
    params: tuple[tuple[str, str], ...] = ()
    source: CandidateSource = CandidateSource.STATIC
    payload: str | None = None

    @classmethod
    def static(cls, path: str, method: str = "GET") -> ProbeCandidate:
        return cls(method=method.upper(), path=path)

    @classmethod
    def from_captured(cls, call: CapturedCall) -> ProbeCandidate:
        return cls(
            method=call.method.upper(),
            path=call.endpoint,
            source=CandidateSource.CAPTURED,
            payload=call.payload,
        )

    @property
    def placeholders(self) -> set[str]:
        return {name for _, name, _, _ in string.Formatter().parse(self.path) if name}

    def bind(self, params: dict[str, Any]) -> ProbeCandidate:
        """Return a copy carrying the parameters needed by the template."""
        needed = self.placeholders
        bound = tuple(sorted((key, str(value)) for key, value in params.items() if key in needed))
        return ProbeCandidate(
            method=self.method,
            path=self.path,
            params=bound,
            source=self.source,
            payload=self.payload,
        )

    @property
    def is_absolute(self) -> bool:
        return self.path.startswith(("http://", "https://"))

    def render_path(self) -> str:
        if self.source is CandidateSource.CAPTURED or not self.placeholders:
            return self.path
        values = {key: quote(value, safe="") for key, value in self.params}
        return self.path.format(**values)

    def url(self, base_url: str) -> str:
        rendered = self.render_path()
        if self.is_absolute:
            return rendered
        return f"{base_url.rstrip('/')}/{rendered.lstrip('/')}"

    def describe(self) -> str:
        return f"{self.method} {self.render_path()} ({self.source.value})"


@dataclass(frozen=True)
class CandidateFailure:
    candidate: ProbeCandidate
    status_code: int | None = None
    error_category: str | None = None
    reason: str = ""


@dataclass(frozen=True)
class ProbeHit:
    """First candidate that answered with a usable 2xx response."""

    query: str
    verdict: ResponseVerdict
    candidate: ProbeCandidate
    url: str
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None
    matches: tuple[Any, ...] | None = None
    failures: tuple[CandidateFailure, ...] = ()

    found = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "found": True,
            "query": self.query,
            "endpoint": self.url,
            "source": self.candidate.source.value,
            "status_code": self.status_code,
            "verdict": self.verdict.to_dict(),
            "matches": list(self.matches) if self.matches is not None else None,
            "skipped_candidates": len(self.failures),
        }


@dataclass(frozen=True)
class NotFound:
    """
    Every candidate failed: no assertable data for this query.

    This is a regular result, not an error. It is falsy so callers can write
    ``if not result: ...``.
    """

    query: str
    attempted: tuple[ProbeCandidate, ...] = ()
    failures: tuple[CandidateFailure, ...] = ()

    found = False

    def __bool__(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "found": False,
            "query": self.query,
            "attempted": [candidate.describe() for candidate in self.attempted],
            "failures": [
                {
                    "candidate": failure.candidate.describe(),
                    "status_code": failure.status_code,
                    "error_category": failure.error_category,
                    "reason": failure.reason,
                }
                for failure in self.failures
            ],
        }


ProbeOutcome = ProbeHit | NotFound
