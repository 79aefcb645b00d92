# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

from bankprobe.config import HttpSettings
from bankprobe.discovery import CaptureLog, Prober, decode_structured
from bankprobe.http import HttpResponse, RetryConfig
from bankprobe.http.adapters import StubHttpClient
from bankprobe.models.probe import CandidateSource, NotFound, ProbeHit
from bankprobe.models.verdict import CheckStatus, ResponseShape

BASE = "https://bank.test/parabank"
PARAMS = {"account_id": "13344", "amount": "35.68"}

BY_AMOUNT_URL = f"{BASE}/services/bank/accounts/13344/transactions/amount/35.68"
ALL_TX_URL = f"{BASE}/services/bank/accounts/13344/transactions"
ACTIVITY_URL = f"{BASE}/activity.htm?id=13344"

TRANSACTIONS = [
    {"id": 1, "accountId": 13344, "type": "Debit", "date": 1717200000000, "amount": 35.68, "description": "Bill Payment"},
    {"id": 2, "accountId": 13344, "type": "Credit", "date": 1717200000000, "amount": 100.0, "description": "Funds Transfer"},
]


def _json(data, status=200):
    return HttpResponse(ok=True, status_code=status, headers={"Content-Type": "application/json"}, text=json.dumps(data))


def _prober(client, log=None):
    return Prober(
        http_client=client,
        capture_log=log or CaptureLog(),
        settings=HttpSettings(base_url=BASE, timeout=3.0),
        retry_config=RetryConfig(max_attempts=1),
    )


def test_first_successful_static_candidate_wins():
    client = StubHttpClient(
        {
            BY_AMOUNT_URL: HttpResponse(ok=True, status_code=404, text="not found"),
            ALL_TX_URL: _json(TRANSACTIONS),
        }
    )

    outcome = _prober(client).probe("transactions_by_amount", PARAMS)

    assert isinstance(outcome, ProbeHit)
    assert outcome
    assert outcome.url == ALL_TX_URL
    assert outcome.verdict.shape is ResponseShape.ARRAY
    assert outcome.verdict.summary.missing == 0
    assert [record["id"] for record in outcome.matches] == [1]
    assert len(outcome.failures) == 1
    assert outcome.failures[0].status_code == 404
    assert outcome.failures[0].error_category == "HTTP_STATUS"
    assert outcome.failures[0].reason == "HTTP 404: not found"
    assert client.requested_urls == [BY_AMOUNT_URL, ALL_TX_URL]


def test_captured_call_short_circuits_static_fallbacks():
    captured_url = f"{BASE}/services_proxy/bank/accounts/13344/transactions/month/All/type/All"
    log = CaptureLog()
    log.append(captured_url)
    client = StubHttpClient({captured_url: _json(TRANSACTIONS), BY_AMOUNT_URL: _json([])})

    outcome = _prober(client, log).probe("transactions_by_amount", PARAMS)

    assert outcome.candidate.source is CandidateSource.CAPTURED
    assert outcome.url == captured_url
    assert client.requested_urls == [captured_url]


def test_captured_post_replays_payload():
    captured_url = f"{BASE}/services_proxy/bank/transactions/search"
    log = CaptureLog()
    log.append(captured_url, "POST", '{"accountId":13344}')
    client = StubHttpClient()
    client.add(captured_url, _json(TRANSACTIONS), method="POST")

    outcome = _prober(client, log).probe("transactions_by_amount", PARAMS)

    assert outcome
    request = client.requests[0]
    assert request.method == "POST"
    assert request.body == '{"accountId":13344}'
    assert request.headers["Content-Type"] == "application/json"
    assert request.timeout == 3.0


def test_markup_answer_yields_reference_checks():
    client = StubHttpClient(
        {
            ACTIVITY_URL: HttpResponse(
                ok=True,
                status_code=200,
                headers={"Content-Type": "text/html"},
                text="<h1>Account Activity</h1><td>13344</td><td>$100.00</td>",
            ),
        }
    )

    outcome = _prober(client).probe("transactions_by_amount", PARAMS)

    assert outcome.url == ACTIVITY_URL
    assert outcome.data is None
    assert outcome.matches is None
    verdict = outcome.verdict
    assert verdict.shape is ResponseShape.MARKUP
    assert verdict.status_of("accountReference", check="reference") is CheckStatus.PASS
    assert verdict.status_of("amountReference", check="reference") is CheckStatus.FAIL
    assert len(outcome.failures) == 3


def test_transport_failures_are_recorded_and_never_raised():
    client = StubHttpClient(
        {
            BY_AMOUNT_URL: HttpResponse(ok=False, error_message="timed out", error_type="ReadTimeout"),
        }
    )

    outcome = _prober(client).probe("transactions_by_amount", PARAMS)

    assert isinstance(outcome, NotFound)
    assert not outcome
    assert outcome.found is False
    assert len(outcome.attempted) == 6
    assert len(outcome.failures) == 6
    assert outcome.failures[0].error_category == "TIMEOUT"
    assert outcome.failures[1].error_category == "UNKNOWN_ERROR"
    assert outcome.to_dict()["failures"][0]["reason"] == "timed out"


def test_json_null_is_a_usable_answer():
    client = StubHttpClient({BY_AMOUNT_URL: _json(None)})

    outcome = _prober(client).probe("transactions_by_amount", PARAMS)

    assert outcome
    assert outcome.verdict.shape is ResponseShape.NULL
    assert outcome.verdict.has_failures


def test_account_details_uses_account_schema():
    details_url = f"{BASE}/services/bank/accounts/13344"
    client = StubHttpClient(
        {details_url: _json({"id": 13344, "customerId": 12212, "type": "CHECKING", "balance": "abc"})}
    )

    outcome = _prober(client).probe("account_details", {"account_id": 13344})

    assert outcome.verdict.shape is ResponseShape.OBJECT
    assert outcome.verdict.status_of("balance", check="decimal") is CheckStatus.FAIL
    assert outcome.matches is None


def test_probe_result_serializes():
    client = StubHttpClient({BY_AMOUNT_URL: _json(TRANSACTIONS[:1])})

    payload = _prober(client).probe("transactions_by_amount", PARAMS).to_dict()

    assert payload["found"] is True
    assert payload["endpoint"] == BY_AMOUNT_URL
    assert payload["source"] == "static"
    assert payload["verdict"]["summary"]["fail"] == 0
    assert len(payload["matches"]) == 1


def test_decode_structured_distinguishes_markup():
    assert decode_structured(HttpResponse(ok=True, status_code=200, text="[1]")) == [1]
    assert decode_structured(HttpResponse(ok=True, status_code=200, text="null")) is None
    html = decode_structured(HttpResponse(ok=True, status_code=200, text="<html></html>"))
    empty = decode_structured(HttpResponse(ok=True, status_code=200, text=""))
    assert html is empty
    assert html is not None
