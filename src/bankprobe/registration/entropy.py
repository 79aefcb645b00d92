# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Identity and test-value generation for registration runs."""

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable

from ..config import DEFAULT_PASSWORD
from ..models.registration import Identity

logger = logging.getLogger(__name__)

USERNAME_PREFIX = "usr"
USERNAME_MAX_LENGTH = 32

FIRST_NAMES = (
    "Alice", "Bruno", "Carmen", "Dmitri", "Elena", "Farid", "Grace", "Hiro",
    "Ingrid", "Jamal", "Keiko", "Liam", "Maya", "Nikolai", "Olivia", "Priya",
)
LAST_NAMES = (
    "Anders", "Baker", "Castillo", "Dubois", "Eriksen", "Fischer", "Garcia", "Hughes",
    "Ivanova", "Jensen", "Kowalski", "Larsen", "Moreau", "Nakamura", "Okafor", "Patel",
)
STREETS = ("Main St", "Oak Ave", "Maple Dr", "Cedar Ln", "Pine Rd", "Elm St", "Lakeview Blvd", "Hill Ct")
CITIES = (
    ("Springfield", "IL"),
    ("Riverside", "CA"),
    ("Franklin", "TN"),
    ("Madison", "WI"),
    ("Georgetown", "TX"),
    ("Salem", "OR"),
    ("Clinton", "NY"),
    ("Arlington", "VA"),
)


def _pick(options):
    return options[secrets.randbelow(len(options))]


def _between(low: int, high: int) -> int:
    return low + secrets.randbelow(high - low + 1)


def sequential_username(attempt: int = 0, clock_ns: Callable[[], int] = time.perf_counter_ns) -> str:
    """``usr`` + 12 random hex chars + clock digits, suffixed ``a<attempt>`` for retries."""
    nano = str(clock_ns())[-8:]
    suffix = f"a{attempt}" if attempt > 0 else ""
    return f"{USERNAME_PREFIX}{secrets.token_hex(6)}{nano}{suffix}"[:USERNAME_MAX_LENGTH]


def generate_ssn() -> str:
    return f"{_between(100, 665)}-{_between(10, 99)}-{_between(1000, 9999)}"


def generate_phone_number() -> str:
    return f"{_between(200, 999)}-{_between(200, 999)}-{_between(0, 9999):04d}"


class EntropySource:
    """
    Issues identities whose usernames are unique within this source's lifetime.

    Every issued username is remembered; ``reserve`` adds names known to be taken
    (for example the caller's initial identity). A generated name that collides is
    regenerated, so two identities from one source never share a username.
    """

    def __init__(
        self,
        password: str = DEFAULT_PASSWORD,
        clock_ns: Callable[[], int] = time.perf_counter_ns,
        max_collisions: int = 100,
    ):
        self.password = password
        self._clock_ns = clock_ns
        self._max_collisions = max_collisions
        self._issued: set[str] = set()

    @property
    def issued(self) -> frozenset[str]:
        return frozenset(self._issued)

    def reserve(self, username: str) -> None:
        self._issued.add(username)

    def new_username(self, seed: int | None = None) -> str:
        for _ in range(self._max_collisions):
            candidate = sequential_username(seed or 0, self._clock_ns)
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
            logger.debug("Regenerating colliding username %s", candidate)
        raise RuntimeError("entropy source could not produce an unused username")

    def new_identity(self, seed: int | None = None, based_on: Identity | None = None) -> Identity:
        """
        Fresh identity. With ``based_on`` only the username changes, keeping the rest
        of the profile stable across retries.
        """
        username = self.new_username(seed)
        if based_on is not None:
            return based_on.with_username(username)

        city, state = _pick(CITIES)
        return Identity(
            username=username,
            password=self.password,
            first_name=_pick(FIRST_NAMES),
            last_name=_pick(LAST_NAMES),
            address=f"{_between(1, 9999)} {_pick(STREETS)}",
            city=city,
            state=state,
            zip_code=f"{_between(10000, 99999)}",
            phone_number=generate_phone_number(),
            ssn=generate_ssn(),
        )


__all__ = [
    "EntropySource",
    "USERNAME_MAX_LENGTH",
    "generate_phone_number",
    "generate_ssn",
    "sequential_username",
]
