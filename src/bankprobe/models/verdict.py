# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Verdict models produced by the response classifier."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class ResponseShape(str, Enum):
    ARRAY = "array"
    OBJECT = "object"
    MARKUP = "markup"
    PRIMITIVE = "primitive"
    NULL = "null"


class CheckStatus(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    MISSING = "MISSING"
    INFO = "INFO"


def detached(value: Any) -> Any:
    """Deep copy of container values so verdicts never alias the response they came from."""
    if isinstance(value, (Mapping, list, tuple, set)):
        return copy.deepcopy(value)
    return value


@dataclass(frozen=True)
class FieldInfo:
    """Observed type and sample value of one response field."""

    observed_type: str
    sample_value: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sample_value", detached(self.sample_value))


@dataclass(frozen=True)
class FieldCheck:
    field: str
    status: CheckStatus
    value: Any = None
    reason: str | None = None
    check: str = "presence"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", detached(self.value))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"field": self.field, "status": self.status.value, "check": self.check}
        if self.value is not None:
            payload["value"] = detached(self.value)
        if self.reason:
            payload["reason"] = self.reason
        return payload


@dataclass(frozen=True)
class VerdictSummary:
    passed: int = 0
    failed: int = 0
    missing: int = 0
    info: int = 0

    @classmethod
    def fold(cls, checks: Iterable[FieldCheck]) -> VerdictSummary:
        counts = dict.fromkeys(CheckStatus, 0)
        for check in checks:
            counts[check.status] += 1
        return cls(
            passed=counts[CheckStatus.PASS],
            failed=counts[CheckStatus.FAIL],
            missing=counts[CheckStatus.MISSING],
            info=counts[CheckStatus.INFO],
        )

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.missing + self.info

    def to_dict(self) -> dict[str, int]:
        return {"pass": self.passed, "fail": self.failed, "missing": self.missing, "info": self.info}


@dataclass(frozen=True)
class ResponseVerdict:
    """
    Structured, read-only result of classifying and validating one response.

    Build instances with :meth:`build`, which freezes the inventory and derives the
    summary from the checks so the two can never disagree.
    """

    shape: ResponseShape
    field_inventory: Mapping[str, FieldInfo] = field(default_factory=lambda: MappingProxyType({}))
    checks: tuple[FieldCheck, ...] = ()
    summary: VerdictSummary = field(default_factory=VerdictSummary)

    @classmethod
    def build(
        cls,
        shape: ResponseShape,
        checks: Iterable[FieldCheck],
        inventory: Mapping[str, FieldInfo] | None = None,
    ) -> ResponseVerdict:
        frozen_checks = tuple(checks)
        return cls(
            shape=shape,
            field_inventory=MappingProxyType(dict(inventory or {})),
            checks=frozen_checks,
            summary=VerdictSummary.fold(frozen_checks),
        )

    def checks_for(self, field_name: str, *, check: str | None = None) -> list[FieldCheck]:
        return [c for c in self.checks if c.field == field_name and (check is None or c.check == check)]

    def status_of(self, field_name: str, *, check: str = "presence") -> CheckStatus | None:
        matches = self.checks_for(field_name, check=check)
        return matches[0].status if matches else None

    @property
    def has_failures(self) -> bool:
        return self.summary.failed > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "shape": self.shape.value,
            "field_inventory": {
                name: {"observed_type": info.observed_type, "sample_value": detached(info.sample_value)}
                for name, info in self.field_inventory.items()
            },
            "checks": [check.to_dict() for check in self.checks],
            "summary": self.summary.to_dict(),
        }
