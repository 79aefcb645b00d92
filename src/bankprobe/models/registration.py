# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Registration identity, attempt and result models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any

from ..errors import RegistrationError


@dataclass(frozen=True)
class Identity:
    """Attributes proposed for one registration attempt."""

    username: str
    password: str
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone_number: str = ""
    ssn: str = ""

    def with_username(self, username: str) -> Identity:
        return replace(self, username=username)

    def to_dict(self, *, redact: bool = True) -> dict[str, str]:
        data = asdict(self)
        if redact:
            data["password"] = "***"
            data["ssn"] = "***" if self.ssn else ""
        return data


class AttemptOutcome(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    CONFLICT = "CONFLICT"
    ERROR = "ERROR"


class AttemptState(str, Enum):
    FILLING = "Filling"
    SUBMITTED = "Submitted"
    CONFLICT_DETECTED = "ConflictDetected"
    PASSWORD_ERROR_DETECTED = "PasswordErrorDetected"
    SUCCESS_DETECTED = "SuccessDetected"
    UNDETERMINED = "Undetermined"


class SubmissionSignal(str, Enum):
    """Tagged outcome of evaluating the page after a submit."""

    CONFLICT = "conflict"
    PASSWORD_ERROR = "password_error"
    SUCCESS = "success"
    UNDETERMINED = "undetermined"
    ADAPTER_ERROR = "adapter_error"

    @property
    def state(self) -> AttemptState:
        return _SIGNAL_STATES[self]

    @property
    def outcome(self) -> AttemptOutcome:
        if self is SubmissionSignal.SUCCESS:
            return AttemptOutcome.SUCCESS
        if self is SubmissionSignal.CONFLICT:
            return AttemptOutcome.CONFLICT
        return AttemptOutcome.ERROR


_SIGNAL_STATES = {
    SubmissionSignal.CONFLICT: AttemptState.CONFLICT_DETECTED,
    SubmissionSignal.PASSWORD_ERROR: AttemptState.PASSWORD_ERROR_DETECTED,
    SubmissionSignal.SUCCESS: AttemptState.SUCCESS_DETECTED,
    SubmissionSignal.UNDETERMINED: AttemptState.UNDETERMINED,
    SubmissionSignal.ADAPTER_ERROR: AttemptState.FILLING,
}


@dataclass(frozen=True)
class RegistrationAttempt:
    attempt_number: int
    identity: Identity
    outcome: AttemptOutcome = AttemptOutcome.PENDING
    state: AttemptState = AttemptState.FILLING
    signal: SubmissionSignal | None = None
    evidence: str | None = None
    error: str | None = None

    def finalize(
        self,
        signal: SubmissionSignal,
        *,
        evidence: str | None = None,
        error: str | None = None,
        state: AttemptState | None = None,
    ) -> RegistrationAttempt:
        return replace(
            self,
            outcome=signal.outcome,
            state=state or signal.state,
            signal=signal,
            evidence=evidence,
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempt": self.attempt_number,
            "username": self.identity.username,
            "outcome": self.outcome.value,
            "state": self.state.value,
            "signal": self.signal.value if self.signal else None,
            "evidence": self.evidence,
            "error": self.error,
        }


class FailureReason(str, Enum):
    CONFLICT_EXHAUSTED = "conflict exhausted"
    PASSWORD_ERROR_EXHAUSTED = "password error exhausted"
    NO_SIGNAL_EXHAUSTED = "exhausted without signal"
    ADAPTER_ERROR_EXHAUSTED = "adapter error exhausted"
    SCENARIO_TIMEOUT = "scenario timeout"


@dataclass(frozen=True)
class RegistrationSuccess:
    identity: Identity
    attempts: tuple[RegistrationAttempt, ...]

    succeeded = True

    def __bool__(self) -> bool:
        return True

    def raise_for_failure(self) -> None:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": True,
            "identity": self.identity.to_dict(),
            "attempts": [attempt.to_dict() for attempt in self.attempts],
        }


@dataclass(frozen=True)
class RegistrationFailure:
    reason: FailureReason
    last_attempt_number: int
    last_signal: SubmissionSignal | None
    attempts: tuple[RegistrationAttempt, ...]
    error: BaseException | None = None

    succeeded = False

    def __bool__(self) -> bool:
        return False

    def raise_for_failure(self) -> None:
        signal = self.last_signal.value if self.last_signal else None
        raise RegistrationError(self.reason.value, self.last_attempt_number, signal) from self.error

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": False,
            "reason": self.reason.value,
            "last_attempt_number": self.last_attempt_number,
            "last_signal": self.last_signal.value if self.last_signal else None,
            "error": str(self.error) if self.error else None,
            "attempts": [attempt.to_dict() for attempt in self.attempts],
        }


RegistrationResult = RegistrationSuccess | RegistrationFailure
