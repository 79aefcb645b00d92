# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for BankProbe."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("BANKPROBE_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Third-party loggers that drown out probe/attempt records below WARNING.
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def setup_logging(level: str | None = None) -> int:
    """Configure root logging for CLI use and return the numeric level applied."""
    effective_level = getattr(logging, (level or DEFAULT_LOG_LEVEL).upper(), logging.WARNING)
    logging.basicConfig(level=effective_level, format=LOG_FORMAT)
    if effective_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(effective_level, logging.WARNING))
    return effective_level


__all__ = ["setup_logging"]
