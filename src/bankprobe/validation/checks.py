# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Typed secondary checks applied to fields that are present in a response.

Each check is independent of the presence check and yields exactly one FieldCheck.
Checks are registered by name so expectation schemas can refer to them as data.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from ..models.verdict import CheckStatus, FieldCheck

CHECK_DECIMAL = "decimal"
CHECK_INTEGER = "integer"
CHECK_DATE = "date"

REASON_NOT_A_NUMBER = "not a number"
REASON_NOT_AN_INTEGER = "not an integer"
REASON_INVALID_DATE = "invalid date"

# Locale layouts seen on banking pages, tried after ISO-8601.
LOCALE_DATE_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%m/%d/%y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%a %b %d %H:%M:%S %Z %Y",
)

# Epoch milliseconds between 1970 and 2100; ParaBank's JSON encodes dates this way.
_EPOCH_MS_MAX = 4_102_444_800_000
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

CheckFn = Callable[[str, Any], FieldCheck]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def parse_decimal(value: Any) -> float | None:
    """Parse a finite decimal number from a JSON scalar; None when it is not one."""
    if _is_number(value):
        number = float(value)
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None
    text = value.strip().replace(",", "")
    if text.startswith("$"):
        text = text[1:]
    elif text.startswith(("-$", "+$")):
        text = text[0] + text[2:]
    if not _DECIMAL_RE.match(text):
        return None
    try:
        number = float(Decimal(text))
    except (InvalidOperation, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_integer(value: Any) -> int | None:
    if _is_number(value):
        number = float(value)
        if math.isfinite(number) and number.is_integer():
            return int(number)
        return None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not re.fullmatch(r"[+-]?\d+", text):
        return None
    return int(text)


def parse_date(value: Any) -> date | None:
    """Parse ISO-8601, a common locale layout, or epoch milliseconds."""
    if _is_number(value):
        number = float(value)
        if not math.isfinite(number) or number < 0 or number > _EPOCH_MS_MAX:
            return None
        return datetime.fromtimestamp(number / 1000.0, tz=timezone.utc).date()
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(iso).date()
    except ValueError:
        pass
    for layout in LOCALE_DATE_FORMATS:
        try:
            return datetime.strptime(text, layout).date()
        except ValueError:
            continue
    return None


def check_decimal(field_name: str, value: Any) -> FieldCheck:
    parsed = parse_decimal(value)
    if parsed is None:
        return FieldCheck(field_name, CheckStatus.FAIL, value=value, reason=REASON_NOT_A_NUMBER, check=CHECK_DECIMAL)
    return FieldCheck(field_name, CheckStatus.PASS, value=parsed, check=CHECK_DECIMAL)


def check_integer(field_name: str, value: Any) -> FieldCheck:
    parsed = parse_integer(value)
    if parsed is None:
        return FieldCheck(field_name, CheckStatus.FAIL, value=value, reason=REASON_NOT_AN_INTEGER, check=CHECK_INTEGER)
    return FieldCheck(field_name, CheckStatus.PASS, value=parsed, check=CHECK_INTEGER)


def check_date(field_name: str, value: Any) -> FieldCheck:
    parsed = parse_date(value)
    if parsed is None:
        return FieldCheck(field_name, CheckStatus.FAIL, value=value, reason=REASON_INVALID_DATE, check=CHECK_DATE)
    return FieldCheck(field_name, CheckStatus.PASS, value=value, check=CHECK_DATE)


TYPED_CHECKS: dict[str, CheckFn] = {
    CHECK_DECIMAL: check_decimal,
    CHECK_INTEGER: check_integer,
    CHECK_DATE: check_date,
}


def run_typed_check(check_name: str, field_name: str, value: Any) -> FieldCheck:
    try:
        check = TYPED_CHECKS[check_name]
    except KeyError:
        raise ValueError(f"Unknown typed check: {check_name}") from None
    return check(field_name, value)


__all__ = [
    "CHECK_DATE",
    "CHECK_DECIMAL",
    "CHECK_INTEGER",
    "REASON_INVALID_DATE",
    "REASON_NOT_AN_INTEGER",
    "REASON_NOT_A_NUMBER",
    "TYPED_CHECKS",
    "check_date",
    "check_decimal",
    "check_integer",
    "parse_date",
    "parse_decimal",
    "parse_integer",
    "run_typed_check",
]
