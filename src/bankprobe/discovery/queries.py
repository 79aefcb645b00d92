# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logical queries and their candidate sets.

Each query is data: which captured calls are relevant to it, which static endpoints
to fall back to (most likely first), which schema its responses are validated
against, and which parameters must show up in a markup answer.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..models.probe import CapturedCall, ProbeCandidate
from ..validation.schemas import ACCOUNT_SCHEMA, BANKING_SCHEMA, ExpectationSchema


@dataclass(frozen=True)
class QueryKind:
    name: str
    fallbacks: tuple[ProbeCandidate, ...]
    schema: ExpectationSchema
    required_params: tuple[str, ...] = ()
    topic_keywords: tuple[str, ...] = ()
    # (keyword, param) pairs: the URL must contain both the keyword and the param's value.
    scoped_keywords: tuple[tuple[str, str], ...] = ()
    reference_params: tuple[tuple[str, str], ...] = ()
    match_param: str | None = None

    def validate_params(self, params: Mapping[str, Any]) -> None:
        missing = [name for name in self.required_params if params.get(name) in (None, "")]
        if missing:
            raise ValueError(f"Query {self.name} requires parameters: {', '.join(missing)}")

    def matches_captured(self, call: CapturedCall, params: Mapping[str, Any]) -> bool:
        endpoint = call.endpoint.lower()
        if any(keyword in endpoint for keyword in self.topic_keywords):
            return True
        for keyword, param in self.scoped_keywords:
            value = params.get(param)
            if value in (None, ""):
                continue
            if keyword in endpoint and str(value).lower() in endpoint:
                return True
        return False

    def references(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return {field_name: params.get(param) for field_name, param in self.reference_params if param in params}

    def static_candidates(self, params: Mapping[str, Any]) -> list[ProbeCandidate]:
        return [candidate.bind(dict(params)) for candidate in self.fallbacks]


TRANSACTIONS_BY_AMOUNT = QueryKind(
    name="transactions_by_amount",
    required_params=("account_id", "amount"),
    topic_keywords=("transaction", "findtrans"),
    scoped_keywords=(("account", "account_id"),),
    fallbacks=(
        ProbeCandidate.static("/services/bank/accounts/{account_id}/transactions/amount/{amount}"),
        ProbeCandidate.static("/services/bank/accounts/{account_id}/transactions"),
        ProbeCandidate.static("/services/bank/transactions/account/{account_id}"),
        ProbeCandidate.static("/activity.htm?id={account_id}"),
        ProbeCandidate.static("/overview.htm"),
        ProbeCandidate.static("/findtrans.htm"),
    ),
    schema=BANKING_SCHEMA,
    reference_params=(("accountReference", "account_id"), ("amountReference", "amount")),
    match_param="amount",
)

ACCOUNT_TRANSACTIONS = QueryKind(
    name="account_transactions",
    required_params=("account_id",),
    topic_keywords=("transaction",),
    scoped_keywords=(("account", "account_id"),),
    fallbacks=(
        ProbeCandidate.static("/services/bank/accounts/{account_id}/transactions"),
        ProbeCandidate.static("/activity.htm?id={account_id}"),
        ProbeCandidate.static("/findtrans.htm"),
    ),
    schema=BANKING_SCHEMA,
    reference_params=(("accountReference", "account_id"),),
)

ACCOUNT_DETAILS = QueryKind(
    name="account_details",
    required_params=("account_id",),
    scoped_keywords=(("account", "account_id"),),
    fallbacks=(
        ProbeCandidate.static("/services/bank/accounts/{account_id}"),
        ProbeCandidate.static("/activity.htm?id={account_id}"),
        ProbeCandidate.static("/overview.htm"),
    ),
    schema=ACCOUNT_SCHEMA,
    reference_params=(("accountReference", "account_id"),),
)

QUERIES: dict[str, QueryKind] = {
    query.name: query for query in (TRANSACTIONS_BY_AMOUNT, ACCOUNT_TRANSACTIONS, ACCOUNT_DETAILS)
}


def get_query(name: str | QueryKind) -> QueryKind:
    if isinstance(name, QueryKind):
        return name
    try:
        return QUERIES[name]
    except KeyError:
        known = ", ".join(sorted(QUERIES))
        raise ValueError(f"Unknown query {name!r}; known queries: {known}") from None


def captured_candidates(
    query: QueryKind,
    calls: Iterable[CapturedCall],
    params: Mapping[str, Any],
) -> list[ProbeCandidate]:
    """Captured calls relevant to ``query``, most recent first, duplicates dropped."""
    indexed = [(index, call) for index, call in enumerate(calls) if query.matches_captured(call, params)]
    # Later observations win ties on timestamp.
    indexed.sort(key=lambda item: (item[1].observed_at, item[0]), reverse=True)
    seen: set[tuple[str, str, str | None]] = set()
    candidates: list[ProbeCandidate] = []
    for _, call in indexed:
        key = (call.method.upper(), call.endpoint, call.payload)
        if key in seen:
            continue
        seen.add(key)
        candidates.append(ProbeCandidate.from_captured(call))
    return candidates


def build_candidates(
    query: QueryKind,
    calls: Iterable[CapturedCall],
    params: Mapping[str, Any],
) -> list[ProbeCandidate]:
    """Ordered candidate list: observed calls always outrank static fallbacks."""
    return captured_candidates(query, calls, params) + query.static_candidates(params)


__all__ = [
    "ACCOUNT_DETAILS",
    "ACCOUNT_TRANSACTIONS",
    "QUERIES",
    "QueryKind",
    "TRANSACTIONS_BY_AMOUNT",
    "build_candidates",
    "captured_candidates",
    "get_query",
]
