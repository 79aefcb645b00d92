# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for BankProbe."""

from ..http.models import Headers, HttpRequest, HttpResponse, RetryConfig
from .probe import (
    CandidateFailure,
    CandidateSource,
    CapturedCall,
    NotFound,
    ProbeCandidate,
    ProbeHit,
    ProbeOutcome,
)
from .registration import (
    AttemptOutcome,
    AttemptState,
    FailureReason,
    Identity,
    RegistrationAttempt,
    RegistrationFailure,
    RegistrationResult,
    RegistrationSuccess,
    SubmissionSignal,
)
from .verdict import CheckStatus, FieldCheck, FieldInfo, ResponseShape, ResponseVerdict, VerdictSummary

__all__ = [
    "AttemptOutcome",
    "AttemptState",
    "CandidateFailure",
    "CandidateSource",
    "CapturedCall",
    "CheckStatus",
    "FailureReason",
    "FieldCheck",
    "FieldInfo",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "Identity",
    "NotFound",
    "ProbeCandidate",
    "ProbeHit",
    "ProbeOutcome",
    "RegistrationAttempt",
    "RegistrationFailure",
    "RegistrationResult",
    "RegistrationSuccess",
    "ResponseShape",
    "ResponseVerdict",
    "RetryConfig",
    "SubmissionSignal",
    "VerdictSummary",
]
