# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Adaptive endpoint discovery exports."""

from .capture import CAPTURE_KEYWORDS, CaptureLog, NetworkCaptureObserver, is_api_call
from .matching import filter_by_amount
from .prober import Prober, decode_structured
from .queries import (
    ACCOUNT_DETAILS,
    ACCOUNT_TRANSACTIONS,
    QUERIES,
    TRANSACTIONS_BY_AMOUNT,
    QueryKind,
    build_candidates,
    get_query,
)

__all__ = [
    "ACCOUNT_DETAILS",
    "ACCOUNT_TRANSACTIONS",
    "CAPTURE_KEYWORDS",
    "CaptureLog",
    "NetworkCaptureObserver",
    "Prober",
    "QUERIES",
    "QueryKind",
    "TRANSACTIONS_BY_AMOUNT",
    "build_candidates",
    "decode_structured",
    "filter_by_amount",
    "get_query",
    "is_api_call",
]
