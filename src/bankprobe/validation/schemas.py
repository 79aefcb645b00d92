# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Declared expectations for banking responses."""

from __future__ import annotations

from dataclasses import dataclass

from .checks import CHECK_DATE, CHECK_DECIMAL, CHECK_INTEGER, TYPED_CHECKS


@dataclass(frozen=True)
class ExpectationSchema:
    """
    What a query's response is expected to contain.

    ``item_fields`` apply to the first element of an array response, ``object_fields``
    to an object response. ``typed_checks`` maps a field to a check name from
    ``validation.checks.TYPED_CHECKS`` and is consulted for whichever shape arrived.
    """

    name: str
    item_fields: tuple[str, ...] = ()
    object_fields: tuple[str, ...] = ()
    typed_checks: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        for field_name, check_name in self.typed_checks:
            if check_name not in TYPED_CHECKS:
                raise ValueError(f"{self.name}: unknown check {check_name!r} for field {field_name!r}")

    def fields_for(self, shape: str) -> tuple[str, ...]:
        return self.item_fields if shape == "array" else self.object_fields


TRANSACTION_FIELDS = ("id", "accountId", "amount", "date", "type", "description")
ACCOUNT_FIELDS = ("id", "customerId", "type", "balance")

BANKING_SCHEMA = ExpectationSchema(
    name="banking",
    item_fields=TRANSACTION_FIELDS,
    object_fields=ACCOUNT_FIELDS,
    typed_checks=(
        ("amount", CHECK_DECIMAL),
        ("accountId", CHECK_INTEGER),
        ("date", CHECK_DATE),
    ),
)

ACCOUNT_SCHEMA = ExpectationSchema(
    name="account",
    item_fields=ACCOUNT_FIELDS,
    object_fields=ACCOUNT_FIELDS,
    typed_checks=(
        ("id", CHECK_INTEGER),
        ("customerId", CHECK_INTEGER),
        ("balance", CHECK_DECIMAL),
    ),
)

__all__ = ["ACCOUNT_SCHEMA", "BANKING_SCHEMA", "ExpectationSchema"]
