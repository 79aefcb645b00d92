# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from bankprobe.models.verdict import CheckStatus, ResponseShape
from bankprobe.validation import ACCOUNT_SCHEMA, BANKING_SCHEMA, ExpectationSchema, classify, classify_markup
from bankprobe.validation.classifier import REASON_EMPTY_ARRAY, REASON_NULL, detect_shape, json_type_name
from bankprobe.validation.schemas import TRANSACTION_FIELDS

TRANSACTION = {
    "id": 14476,
    "accountId": 13344,
    "type": "Debit",
    "date": 1717200000000,
    "amount": 35.68,
    "description": "Bill Payment to Acme Services",
}


def test_non_empty_array_has_one_presence_check_per_declared_field():
    verdict = classify([TRANSACTION, {"id": 2}])

    assert verdict.shape is ResponseShape.ARRAY
    presence = [check for check in verdict.checks if check.check == "presence"]
    assert [check.field for check in presence] == list(TRANSACTION_FIELDS)
    assert all(check.status is CheckStatus.PASS for check in presence)
    assert verdict.status_of("amount", check="decimal") is CheckStatus.PASS
    assert verdict.status_of("accountId", check="integer") is CheckStatus.PASS
    assert verdict.status_of("date", check="date") is CheckStatus.PASS
    assert not verdict.has_failures


def test_only_first_array_element_is_inspected():
    verdict = classify([{"id": 1}, TRANSACTION])

    assert verdict.status_of("id") is CheckStatus.PASS
    assert verdict.status_of("amount") is CheckStatus.MISSING
    assert verdict.checks_for("amount", check="decimal") == []
    assert set(verdict.field_inventory) == {"id"}


def test_empty_array_yields_single_info():
    verdict = classify([])

    assert verdict.shape is ResponseShape.ARRAY
    assert len(verdict.checks) == 1
    assert verdict.checks[0].status is CheckStatus.INFO
    assert verdict.checks[0].reason == REASON_EMPTY_ARRAY
    assert verdict.summary.info == 1
    assert verdict.summary.total == 1


def test_null_yields_single_fail():
    verdict = classify(None)

    assert verdict.shape is ResponseShape.NULL
    assert len(verdict.checks) == 1
    assert verdict.checks[0].status is CheckStatus.FAIL
    assert verdict.checks[0].reason == REASON_NULL
    assert verdict.has_failures


def test_array_of_primitives_reports_declared_fields_missing():
    verdict = classify([1, 2, 3])

    info = [check for check in verdict.checks if check.status is CheckStatus.INFO]
    assert len(info) == 1
    assert verdict.summary.missing == len(TRANSACTION_FIELDS)


def test_object_is_validated_against_object_fields():
    account = {"id": 13344, "customerId": 12212, "type": "CHECKING", "balance": "515.50"}
    verdict = classify(account)

    assert verdict.shape is ResponseShape.OBJECT
    assert [c.field for c in verdict.checks if c.check == "presence"] == ["id", "customerId", "type", "balance"]
    assert verdict.summary.missing == 0


def test_object_missing_field_is_reported_not_failed():
    verdict = classify({"id": 1, "type": "SAVINGS"})

    assert verdict.status_of("customerId") is CheckStatus.MISSING
    assert verdict.status_of("balance") is CheckStatus.MISSING
    assert verdict.summary.failed == 0


def test_extra_fields_are_inventoried_and_never_fail():
    record = dict(TRANSACTION, memo="rent", tags=["a", "b"])
    verdict = classify([record])

    assert verdict.field_inventory["memo"].observed_type == "string"
    assert verdict.field_inventory["tags"].observed_type == "array"
    assert verdict.field_inventory["amount"].observed_type == "number"
    assert verdict.checks_for("memo") == []
    assert not verdict.has_failures


def test_inventory_is_read_only_and_detached_from_input():
    record = dict(TRANSACTION, tags=["a"])
    verdict = classify(record)
    record["tags"].append("b")

    assert verdict.field_inventory["tags"].sample_value == ["a"]
    with pytest.raises(TypeError):
        verdict.field_inventory["new"] = None  # type: ignore[index]


def test_check_values_do_not_alias_the_response():
    raw = [dict(TRANSACTION, type={"k": "v"}, description=["x"])]
    schema = ExpectationSchema(name="nested", item_fields=("type", "description"), typed_checks=(("description", "date"),))
    verdict = classify(raw, schema)
    before = verdict.to_dict()

    raw[0]["type"]["k"] = "MUTATED"
    raw[0]["description"].append("y")

    assert verdict.to_dict() == before
    assert verdict.checks_for("type")[0].value == {"k": "v"}
    assert verdict.checks_for("description", check="date")[0].value == ["x"]


@pytest.mark.parametrize(
    ("amount", "status", "value"),
    [
        ("35.68", CheckStatus.PASS, 35.68),
        (35.68, CheckStatus.PASS, 35.68),
        ("$1,250.00", CheckStatus.PASS, 1250.0),
        ("-12.5", CheckStatus.PASS, -12.5),
        ("abc", CheckStatus.FAIL, "abc"),
        ("NaN", CheckStatus.FAIL, "NaN"),
        (True, CheckStatus.FAIL, True),
    ],
)
def test_decimal_check(amount, status, value):
    verdict = classify([dict(TRANSACTION, amount=amount)])
    (check,) = verdict.checks_for("amount", check="decimal")

    assert check.status is status
    assert check.value == value
    if status is CheckStatus.FAIL:
        assert check.reason == "not a number"


@pytest.mark.parametrize(
    ("date", "status"),
    [
        ("2024-01-01", CheckStatus.PASS),
        ("2024-01-01T10:15:00Z", CheckStatus.PASS),
        ("01/31/2024", CheckStatus.PASS),
        ("Jan 31, 2024", CheckStatus.PASS),
        (1717200000000, CheckStatus.PASS),
        ("not-a-date", CheckStatus.FAIL),
        ("2024-13-45", CheckStatus.FAIL),
        (-5, CheckStatus.FAIL),
    ],
)
def test_date_check(date, status):
    verdict = classify([dict(TRANSACTION, date=date)])
    (check,) = verdict.checks_for("date", check="date")

    assert check.status is status
    if status is CheckStatus.FAIL:
        assert check.reason == "invalid date"


@pytest.mark.parametrize(
    ("account_id", "status"),
    [(13344, CheckStatus.PASS), ("13344", CheckStatus.PASS), (12.5, CheckStatus.FAIL), ("12a", CheckStatus.FAIL)],
)
def test_integer_check(account_id, status):
    verdict = classify([dict(TRANSACTION, accountId=account_id)])
    (check,) = verdict.checks_for("accountId", check="integer")

    assert check.status is status


def test_typed_check_adds_to_presence_check():
    verdict = classify([dict(TRANSACTION, amount="abc")])

    assert verdict.status_of("amount") is CheckStatus.PASS
    assert verdict.status_of("amount", check="decimal") is CheckStatus.FAIL
    assert verdict.summary.failed == 1


def test_primitive_yields_single_info():
    verdict = classify("OK")

    assert verdict.shape is ResponseShape.PRIMITIVE
    assert len(verdict.checks) == 1
    assert verdict.checks[0].status is CheckStatus.INFO
    assert verdict.checks[0].value == "OK"


def test_summary_is_fold_over_checks():
    verdict = classify([{"id": 1, "amount": "abc", "date": "2024-01-01"}])
    counted = {status: 0 for status in CheckStatus}
    for check in verdict.checks:
        counted[check.status] += 1

    assert verdict.summary.passed == counted[CheckStatus.PASS]
    assert verdict.summary.failed == counted[CheckStatus.FAIL]
    assert verdict.summary.missing == counted[CheckStatus.MISSING]
    assert verdict.summary.info == counted[CheckStatus.INFO]


def test_classify_is_idempotent():
    payload = [dict(TRANSACTION, tags=["x"])]
    assert classify(payload) == classify(payload)
    assert classify(None) == classify(None)
    assert classify({"id": 1}, ACCOUNT_SCHEMA).to_dict() == classify({"id": 1}, ACCOUNT_SCHEMA).to_dict()


def test_custom_schema_and_unknown_check_name():
    schema = ExpectationSchema(name="payee", object_fields=("name", "accountNumber"), typed_checks=(("accountNumber", "integer"),))
    verdict = classify({"name": "Acme", "accountNumber": "54321"}, schema)
    assert verdict.status_of("accountNumber", check="integer") is CheckStatus.PASS

    with pytest.raises(ValueError):
        ExpectationSchema(name="broken", typed_checks=(("x", "currency"),))


def test_classify_markup_reference_checks():
    html = "<table><tr><td>13344</td><td>$35.68</td></tr></table>"
    verdict = classify_markup(html, {"accountReference": 13344, "amountReference": "99.99"})

    assert verdict.shape is ResponseShape.MARKUP
    assert verdict.status_of("accountReference", check="reference") is CheckStatus.PASS
    assert verdict.checks_for("accountReference")[0].value is True
    failed = verdict.checks_for("amountReference")[0]
    assert failed.status is CheckStatus.FAIL
    assert failed.value is False


def test_shape_and_type_helpers():
    assert detect_shape([]) is ResponseShape.ARRAY
    assert detect_shape({}) is ResponseShape.OBJECT
    assert detect_shape(3) is ResponseShape.PRIMITIVE
    assert json_type_name(True) == "boolean"
    assert json_type_name(None) == "null"
    assert BANKING_SCHEMA.fields_for("array") == TRANSACTION_FIELDS
