# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response classification and validation exports."""

from .checks import TYPED_CHECKS, parse_date, parse_decimal, parse_integer
from .classifier import classify, classify_markup, detect_shape
from .schemas import ACCOUNT_SCHEMA, BANKING_SCHEMA, ExpectationSchema

__all__ = [
    "ACCOUNT_SCHEMA",
    "BANKING_SCHEMA",
    "ExpectationSchema",
    "TYPED_CHECKS",
    "classify",
    "classify_markup",
    "detect_shape",
    "parse_date",
    "parse_decimal",
    "parse_integer",
]
