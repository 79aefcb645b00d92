# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Amount matching over array responses."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..validation.checks import parse_decimal

AMOUNT_TOLERANCE = 0.01


def filter_by_amount(
    records: Sequence[Any],
    amount: Any,
    *,
    field_name: str = "amount",
    tolerance: float = AMOUNT_TOLERANCE,
) -> list[Mapping[str, Any]]:
    """
    Records whose absolute amount is within ``tolerance`` of ``amount``.

    Debits are reported as negative amounts by some endpoints, hence the absolute value.
    Records without a parseable amount never match.
    """
    wanted = parse_decimal(amount)
    if wanted is None:
        return []
    wanted = abs(wanted)
    matches: list[Mapping[str, Any]] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        value = parse_decimal(record.get(field_name))
        if value is None:
            continue
        if abs(abs(value) - wanted) < tolerance:
            matches.append(record)
    return matches


__all__ = ["AMOUNT_TOLERANCE", "filter_by_amount"]
