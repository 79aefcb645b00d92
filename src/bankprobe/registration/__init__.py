# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Registration workflow: adapter capability, identities, signals and the retry controller."""

from .adapter import FieldActionAdapter
from .controller import RetryController
from .entropy import EntropySource, generate_ssn, sequential_username
from .form import DEFAULT_FORM, FormField, RegistrationForm
from .signals import SIGNAL_PIPELINE, SignalDetector, evaluate_submission

__all__ = [
    "DEFAULT_FORM",
    "EntropySource",
    "FieldActionAdapter",
    "FormField",
    "RegistrationForm",
    "RetryController",
    "SIGNAL_PIPELINE",
    "SignalDetector",
    "evaluate_submission",
    "generate_ssn",
    "sequential_username",
]
