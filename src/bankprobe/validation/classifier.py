# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Response classifier and validator.

``classify`` turns one decoded response body into a ``ResponseVerdict``: it detects
the shape, inventories the fields, checks the declared expectations for presence
and layers the typed checks on top. It is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from ..models.verdict import CheckStatus, FieldCheck, FieldInfo, ResponseShape, ResponseVerdict
from .checks import run_typed_check
from .schemas import BANKING_SCHEMA, ExpectationSchema

logger = logging.getLogger(__name__)

CHECK_PRESENCE = "presence"
CHECK_SHAPE = "shape"
CHECK_REFERENCE = "reference"

REASON_NULL = "response is null"
REASON_EMPTY_ARRAY = "empty array response"
REASON_NON_OBJECT_ITEMS = "array items are not objects"
REASON_FIELD_MISSING = "field not found in response"


def json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence):
        return "array"
    return type(value).__name__


def detect_shape(raw: Any) -> ResponseShape:
    if raw is None:
        return ResponseShape.NULL
    if isinstance(raw, (list, tuple)):
        return ResponseShape.ARRAY
    if isinstance(raw, Mapping):
        return ResponseShape.OBJECT
    return ResponseShape.PRIMITIVE


def build_inventory(record: Mapping[str, Any]) -> dict[str, FieldInfo]:
    inventory: dict[str, FieldInfo] = {}
    for name, value in record.items():
        inventory[str(name)] = FieldInfo(observed_type=json_type_name(value), sample_value=value)
    return inventory


def _expectation_checks(
    record: Mapping[str, Any],
    expected_fields: Sequence[str],
    schema: ExpectationSchema,
) -> list[FieldCheck]:
    checks: list[FieldCheck] = []
    for field_name in expected_fields:
        if field_name in record:
            checks.append(FieldCheck(field_name, CheckStatus.PASS, value=record[field_name], check=CHECK_PRESENCE))
        else:
            checks.append(FieldCheck(field_name, CheckStatus.MISSING, reason=REASON_FIELD_MISSING, check=CHECK_PRESENCE))

    for field_name, check_name in schema.typed_checks:
        if field_name in record:
            checks.append(run_typed_check(check_name, field_name, record[field_name]))
    return checks


def _classify_array(raw: Sequence[Any], schema: ExpectationSchema) -> ResponseVerdict:
    if not raw:
        return ResponseVerdict.build(
            ResponseShape.ARRAY,
            [FieldCheck("array", CheckStatus.INFO, reason=REASON_EMPTY_ARRAY, check=CHECK_SHAPE)],
        )

    # Only the first element is sampled; the cost stays constant in response size.
    first = raw[0]
    if not isinstance(first, Mapping):
        checks = [FieldCheck("array", CheckStatus.INFO, value=first, reason=REASON_NON_OBJECT_ITEMS, check=CHECK_SHAPE)]
        checks.extend(_expectation_checks({}, schema.item_fields, schema))
        return ResponseVerdict.build(ResponseShape.ARRAY, checks)

    checks = _expectation_checks(first, schema.item_fields, schema)
    return ResponseVerdict.build(ResponseShape.ARRAY, checks, build_inventory(first))


def _classify_object(raw: Mapping[str, Any], schema: ExpectationSchema) -> ResponseVerdict:
    checks = _expectation_checks(raw, schema.object_fields, schema)
    return ResponseVerdict.build(ResponseShape.OBJECT, checks, build_inventory(raw))


def classify(raw: Any, schema: ExpectationSchema | None = None) -> ResponseVerdict:
    """Classify a decoded response body and validate it against ``schema``."""
    schema = schema or BANKING_SCHEMA
    shape = detect_shape(raw)

    if shape is ResponseShape.NULL:
        verdict = ResponseVerdict.build(
            ResponseShape.NULL,
            [FieldCheck("response", CheckStatus.FAIL, reason=REASON_NULL, check=CHECK_SHAPE)],
        )
    elif shape is ResponseShape.ARRAY:
        verdict = _classify_array(raw, schema)
    elif shape is ResponseShape.OBJECT:
        verdict = _classify_object(raw, schema)
    else:
        verdict = ResponseVerdict.build(
            ResponseShape.PRIMITIVE,
            [FieldCheck("response", CheckStatus.INFO, value=raw, reason=f"primitive {json_type_name(raw)}", check=CHECK_SHAPE)],
            {"value": FieldInfo(observed_type=json_type_name(raw), sample_value=raw)},
        )

    logger.debug(
        "Classified %s response against %s: %s",
        verdict.shape.value,
        schema.name,
        verdict.summary.to_dict(),
    )
    return verdict


def classify_markup(text: str, references: Mapping[str, Any]) -> ResponseVerdict:
    """
    Build a verdict for a 2xx response that was not structured data.

    ``references`` maps a check name (e.g. ``accountReference``) to the literal value
    that should appear somewhere in the markup.
    """
    body = text or ""
    checks: list[FieldCheck] = []
    for field_name, expected in references.items():
        needle = "" if expected is None else str(expected)
        present = bool(needle) and needle in body
        checks.append(
            FieldCheck(
                field_name,
                CheckStatus.PASS if present else CheckStatus.FAIL,
                value=present,
                reason=None if present else f"{needle!r} not found in markup",
                check=CHECK_REFERENCE,
            )
        )
    return ResponseVerdict.build(
        ResponseShape.MARKUP,
        checks,
        {"markup": FieldInfo(observed_type="string", sample_value=body[:200])},
    )


__all__ = [
    "CHECK_PRESENCE",
    "CHECK_REFERENCE",
    "CHECK_SHAPE",
    "REASON_EMPTY_ARRAY",
    "REASON_NULL",
    "build_inventory",
    "classify",
    "classify_markup",
    "detect_shape",
    "json_type_name",
]
