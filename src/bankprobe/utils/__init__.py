# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared utility exports."""

from .context import ProbeContext, get_http_settings, get_probe_context, probe_context

__all__ = ["ProbeContext", "get_http_settings", "get_probe_context", "probe_context"]
