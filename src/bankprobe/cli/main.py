# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""BankProbe CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..config import load_browser_settings, load_http_settings, load_registration_settings
from ..discovery.queries import QUERIES
from ..log import setup_logging
from ..runtime import BankProbe

CLI_TEXT_TRUNCATION_BYTES = 4096


def _parse_param(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected key=value, got {raw!r}")
    return name.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BankProbe banking workflow verifier")
    parser.add_argument("--base-url", help="Banking application base URL (overrides BANKPROBE_BASE_URL)")
    parser.add_argument("--log-level", help="Logging level (overrides BANKPROBE_LOG_LEVEL)")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    probe = subcommands.add_parser("probe", help="Discover an endpoint for a query and validate its response")
    probe.add_argument("query", choices=sorted(QUERIES), help="Logical query to run")
    probe.add_argument(
        "--param",
        action="append",
        default=[],
        type=_parse_param,
        metavar="KEY=VALUE",
        help="Query parameter, e.g. --param account_id=13344 (repeatable)",
    )
    probe.add_argument("--json", action="store_true", help="Output JSON instead of a human-friendly summary")

    register = subcommands.add_parser("register", help="Register a new user through the browser UI")
    register.add_argument("--max-attempts", type=int, help="Attempt cap (overrides BANKPROBE_REGISTER_MAX_ATTEMPTS)")
    register.add_argument("--headed", action="store_true", help="Show the browser window")
    register.add_argument("--json", action="store_true", help="Output JSON instead of a human-friendly summary")
    return parser


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max_bytes - len(suffix.encode("utf-8"))
    if keep <= 0:
        return suffix[:max_bytes]
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _truncate_for_cli(value: Any, *, max_bytes: int) -> Any:
    if isinstance(value, str):
        return _truncate_text_bytes(value, max_bytes)
    if isinstance(value, dict):
        return {k: _truncate_for_cli(v, max_bytes=max_bytes) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_truncate_for_cli(v, max_bytes=max_bytes) for v in value]
    return value


def _print_json(data: Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(_truncate_for_cli(payload, max_bytes=CLI_TEXT_TRUNCATION_BYTES), sys.stdout, indent=2, sort_keys=True, default=str)
    sys.stdout.write("\n")


def _print_probe(outcome: Any) -> None:
    payload = outcome.to_dict()
    if not payload.get("found"):
        print(f"[BankProbe] {payload.get('query')}: no candidate returned assertable data")
        for failure in payload.get("failures") or []:
            print(f"- {failure.get('candidate')}: {failure.get('reason')}")
        return

    verdict = payload.get("verdict") or {}
    summary = verdict.get("summary") or {}
    print(f"[BankProbe] {payload.get('query')}: {payload.get('endpoint')} (HTTP {payload.get('status_code')})")
    print(f"Shape: {verdict.get('shape')}")
    print(
        "Checks: {pass} pass, {fail} fail, {missing} missing, {info} info".format(
            **{key: summary.get(key, 0) for key in ("pass", "fail", "missing", "info")}
        )
    )
    for check in verdict.get("checks") or []:
        if check.get("status") in ("FAIL", "MISSING"):
            print(f"- {check.get('field')} [{check.get('check')}]: {check.get('status')} {check.get('reason') or ''}".rstrip())
    matches = payload.get("matches")
    if matches is not None:
        print(f"Matching records: {len(matches)}")


def _print_registration(result: Any) -> None:
    payload = result.to_dict()
    attempts = payload.get("attempts") or []
    if payload.get("succeeded"):
        username = (payload.get("identity") or {}).get("username")
        print(f"[BankProbe] Registered {username} after {len(attempts)} attempt(s)")
    else:
        print(f"[BankProbe] Registration failed: {payload.get('reason')} (attempt {payload.get('last_attempt_number')})")
        if payload.get("error"):
            print(f"Error: {payload['error']}")
    for attempt in attempts:
        print(f"- #{attempt['attempt']} {attempt['username']}: {attempt['outcome']} ({attempt['state']})")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    http_settings = load_http_settings()
    if args.base_url:
        http_settings.base_url = args.base_url.rstrip("/")
    if args.ignore_ssl_errors:
        http_settings.verify_ssl = False

    if args.command == "probe":
        params = dict(args.param)
        try:
            QUERIES[args.query].validate_params(params)
        except ValueError as exc:
            parser.error(str(exc))
        with BankProbe(http_settings=http_settings) as probe:
            outcome = probe.probe(args.query, params)
        if args.json:
            _print_json(outcome)
        else:
            _print_probe(outcome)
        return 0 if outcome else 1

    browser_settings = load_browser_settings()
    if args.headed:
        browser_settings.headless = False
    with BankProbe(
        http_settings=http_settings,
        registration_settings=load_registration_settings(),
        browser_settings=browser_settings,
    ) as probe:
        with probe.browser() as adapter:
            result = probe.register(adapter, max_attempts=args.max_attempts)
    if args.json:
        _print_json(result)
    else:
        _print_registration(result)
    return 0 if result else 1


if __name__ == "__main__":
    raise SystemExit(main())
