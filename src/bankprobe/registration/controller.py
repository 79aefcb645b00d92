# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Signal-driven registration retry controller.

One attempt walks Filling -> Submitted -> one of ConflictDetected,
PasswordErrorDetected, SuccessDetected or Undetermined. The post-submit signal
decides what the next attempt changes:

* conflict: new username, seeded with the attempt number
* password error: same identity again
* success: stop
* undetermined or adapter error: new username

Attempts are capped; running out of them yields a ``RegistrationFailure`` rather
than an exception. Any exception raised by the adapter during an attempt counts
as an adapter error for that attempt and is subject to the same cap.

The one exception to the cap is the controller's own scenario deadline: once it
expires the run stops at once with reason ``scenario timeout``, without starting
the remaining attempts. A timeout raised by the adapter itself is an ordinary
adapter error.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from ..config import RegistrationSettings, load_registration_settings
from ..errors import AdapterError, ScenarioTimeout
from ..models.registration import (
    AttemptState,
    FailureReason,
    Identity,
    RegistrationAttempt,
    RegistrationFailure,
    RegistrationResult,
    RegistrationSuccess,
    SubmissionSignal,
)
from .adapter import FieldActionAdapter
from .entropy import EntropySource
from .form import DEFAULT_FORM, RegistrationForm
from .signals import SIGNAL_PIPELINE, SignalDetector, evaluate_submission

logger = logging.getLogger(__name__)

_EXHAUSTED_REASONS = {
    SubmissionSignal.CONFLICT: FailureReason.CONFLICT_EXHAUSTED,
    SubmissionSignal.PASSWORD_ERROR: FailureReason.PASSWORD_ERROR_EXHAUSTED,
    SubmissionSignal.UNDETERMINED: FailureReason.NO_SIGNAL_EXHAUSTED,
    SubmissionSignal.ADAPTER_ERROR: FailureReason.ADAPTER_ERROR_EXHAUSTED,
}


class RetryController:
    def __init__(
        self,
        adapter: FieldActionAdapter,
        entropy: EntropySource | None = None,
        settings: RegistrationSettings | None = None,
        form: RegistrationForm = DEFAULT_FORM,
        signals: Iterable[SignalDetector] = SIGNAL_PIPELINE,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.adapter = adapter
        self.settings = settings or load_registration_settings()
        self.entropy = entropy or EntropySource(password=self.settings.default_password)
        self.form = form
        self.signals = tuple(signals)
        self._sleep = sleep
        self._clock = clock
        self._deadline: float | None = None

    def create_with_retry(
        self,
        initial_identity: Identity | None = None,
        max_attempts: int | None = None,
    ) -> RegistrationResult:
        """
        Register an account, retrying on non-success signals up to ``max_attempts``.

        Returns ``RegistrationSuccess`` on the first success signal. Otherwise returns
        ``RegistrationFailure`` when the cap is spent, or immediately with reason
        ``scenario timeout`` when the configured scenario deadline expires.
        """
        cap = self.settings.max_attempts if max_attempts is None else max_attempts
        if cap < 1:
            raise ValueError("max_attempts must be at least 1")

        identity = initial_identity or self.entropy.new_identity()
        self.entropy.reserve(identity.username)
        budget = self.settings.scenario_timeout
        self._deadline = self._clock() + budget if budget is not None else None

        attempts: list[RegistrationAttempt] = []
        for number in range(1, cap + 1):
            logger.info("Registration attempt %d/%d as %s", number, cap, identity.username)
            attempt, exc = self._run_attempt(RegistrationAttempt(number, identity))
            attempts.append(attempt)
            signal = attempt.signal
            logger.info("Attempt %d ended %s (%s)", number, attempt.outcome.value, attempt.state.value)

            if signal is SubmissionSignal.SUCCESS:
                return RegistrationSuccess(identity=identity, attempts=tuple(attempts))

            if isinstance(exc, ScenarioTimeout):
                logger.warning("Scenario deadline reached during attempt %d", number)
                return RegistrationFailure(
                    reason=FailureReason.SCENARIO_TIMEOUT,
                    last_attempt_number=number,
                    last_signal=signal,
                    attempts=tuple(attempts),
                    error=exc,
                )

            if number == cap:
                logger.warning("Registration failed after %d attempt(s): %s", number, _EXHAUSTED_REASONS[signal].value)
                return RegistrationFailure(
                    reason=_EXHAUSTED_REASONS[signal],
                    last_attempt_number=number,
                    last_signal=signal,
                    attempts=tuple(attempts),
                    error=exc,
                )

            if signal is not SubmissionSignal.PASSWORD_ERROR:
                identity = self.entropy.new_identity(seed=number, based_on=identity)
            self._pause(self.settings.error_pause if exc is not None else self.settings.pause)

        # Unreachable: the final iteration always returns.
        raise AssertionError("retry loop exited without a result")

    def _run_attempt(self, attempt: RegistrationAttempt) -> tuple[RegistrationAttempt, AdapterError | None]:
        state = AttemptState.FILLING
        step = "navigate"
        try:
            self._check_deadline(step)
            self.form.open(self.adapter)
            step = "fill"
            self._check_deadline(step)
            self.form.fill(self.adapter, attempt.identity)
            step = "submit"
            self._check_deadline(step)
            self.form.submit(self.adapter)
            state = AttemptState.SUBMITTED
            step = "evaluate"
            self._check_deadline(step)
            signal, evidence = evaluate_submission(self.adapter, self.signals)
        except AdapterError as exc:
            logger.warning("Attempt %d: %s", attempt.attempt_number, exc)
            return attempt.finalize(SubmissionSignal.ADAPTER_ERROR, error=str(exc), state=state), exc
        except Exception as exc:  # noqa: BLE001
            wrapped = AdapterError(step, None, f"{type(exc).__name__}: {exc}")
            wrapped.__cause__ = exc
            logger.warning("Attempt %d: %s", attempt.attempt_number, wrapped)
            return attempt.finalize(SubmissionSignal.ADAPTER_ERROR, error=str(wrapped), state=state), wrapped
        return attempt.finalize(signal, evidence=evidence), None

    def _check_deadline(self, step: str) -> None:
        if self._deadline is not None and self._clock() >= self._deadline:
            raise ScenarioTimeout(step, self.settings.scenario_timeout or 0.0)

    def _pause(self, seconds: float) -> None:
        if self._deadline is not None:
            seconds = min(seconds, max(0.0, self._deadline - self._clock()))
        if seconds > 0:
            self._sleep(seconds)


__all__ = ["RetryController"]
