# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Case-insensitive header access for normalized responses."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def _pairs(headers: Any) -> Iterable[tuple[object, object]]:
    if isinstance(headers, Mapping):
        return headers.items()
    items = getattr(headers, "items", None)
    if callable(items):
        return items()
    return headers


def normalize_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping (or httpx.Headers / pair list)."""
    if not headers:
        return {}
    out: dict[str, str] = {}
    try:
        pairs = list(_pairs(headers))
    except (TypeError, ValueError):
        return {}
    for pair in pairs:
        try:
            key, value = pair
        except (TypeError, ValueError):
            continue
        name = "" if key is None else str(key).strip().lower()
        if name:
            out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[object, object] | None, name: str, default: str = "") -> str:
    if not headers or not name:
        return default
    value = normalize_headers(headers).get(name.lower())
    return default if value is None else value.strip()


def media_type(headers: Mapping[object, object] | None) -> str:
    """Bare media type of ``Content-Type`` without parameters, e.g. ``application/json``."""
    return header_value(headers, "content-type").split(";", 1)[0].strip().lower()


__all__ = ["header_value", "media_type", "normalize_headers"]
