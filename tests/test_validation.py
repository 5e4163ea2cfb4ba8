# tests/test_validation.py

from datetime import datetime

import pytest

from task_manager.errors import ValidationFault
from task_manager.validation import (
    ID_MESSAGE,
    ValidationMode,
    check_task_id,
    check_task_payload,
    validate_request,
)

DUE = "2024-12-31T23:59:59.000Z"


def _fields(violations):
    return [v.field for v in violations]


# ============================================================
# CREATE MODE
# ============================================================

def test_create_valid_payload_has_no_violations():
    payload = {"title": "Review case documents", "status": "pending", "due_date": DUE}
    assert check_task_payload(payload, ValidationMode.CREATE) == []


def test_create_empty_title_names_title():
    violations = check_task_payload({"title": "", "status": "pending", "due_date": DUE}, ValidationMode.CREATE)
    assert _fields(violations) == ["title"]
    assert violations[0].message == "Title is required and must be between 1 and 255 characters"


def test_create_whitespace_title_is_rejected_after_trim():
    violations = check_task_payload({"title": "   ", "status": "pending", "due_date": DUE}, ValidationMode.CREATE)
    assert _fields(violations) == ["title"]


@pytest.mark.parametrize("length,ok", [(255, True), (256, False)])
def test_create_title_length_limit(length, ok):
    payload = {"title": "x" * length, "status": "pending", "due_date": DUE}
    assert (check_task_payload(payload, ValidationMode.CREATE) == []) is ok


@pytest.mark.parametrize("length,ok", [(1000, True), (1001, False)])
def test_create_description_length_limit(length, ok):
    payload = {"title": "T", "description": "d" * length, "status": "pending", "due_date": DUE}
    assert (check_task_payload(payload, ValidationMode.CREATE) == []) is ok


def test_create_missing_fields_are_reported_in_field_order():
    violations = check_task_payload({}, ValidationMode.CREATE)
    assert _fields(violations) == ["title", "status", "due_date"]


def test_create_none_payload_is_treated_as_empty():
    assert _fields(check_task_payload(None, ValidationMode.CREATE)) == ["title", "status", "due_date"]


def test_create_rejects_unknown_status():
    violations = check_task_payload({"title": "T", "status": "invalid_status", "due_date": DUE}, ValidationMode.CREATE)
    assert _fields(violations) == ["status"]
    assert violations[0].message == "Status must be one of: pending, in_progress, completed, cancelled"


@pytest.mark.parametrize("due", ["invalid-date", "2024-02-30T00:00:00Z", 1735689599, None])
def test_create_rejects_bad_due_date(due):
    violations = check_task_payload({"title": "T", "status": "pending", "due_date": due}, ValidationMode.CREATE)
    assert _fields(violations) == ["due_date"]
    assert violations[0].message == "Due date must be a valid ISO 8601 date"


def test_create_rejects_non_object_body():
    violations = check_task_payload(["title"], ValidationMode.CREATE)
    assert _fields(violations) == ["body"]


def test_create_trims_title_and_normalizes_due_date_to_utc():
    _, task_in = validate_request(
        payload={"title": "  Hearing prep ", "status": "pending", "due_date": "2024-06-01T12:00:00+02:00"},
        mode=ValidationMode.CREATE,
    )
    assert task_in.title == "Hearing prep"
    assert task_in.due_date == datetime(2024, 6, 1, 10, 0, 0)
    assert task_in.description is None


@pytest.mark.parametrize(
    "due,expected",
    [
        ("2025-01-15", datetime(2025, 1, 15)),
        ("2024-12", datetime(2024, 12, 1)),
        ("2024", datetime(2024, 1, 1)),
        ("2024-366", datetime(2024, 12, 31)),
    ],
)
def test_create_accepts_date_only_due_date(due, expected):
    _, task_in = validate_request(
        payload={"title": "T", "status": "pending", "due_date": due},
        mode=ValidationMode.CREATE,
    )
    assert task_in.due_date == expected


@pytest.mark.parametrize("due", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-01:00"])
def test_create_rejects_due_date_outside_utc_range(due):
    violations = check_task_payload({"title": "T", "status": "pending", "due_date": due}, ValidationMode.CREATE)
    assert _fields(violations) == ["due_date"]


# ============================================================
# UPDATE MODE
# ============================================================

def test_update_accepts_empty_payload():
    _, task_in = validate_request(payload={}, mode=ValidationMode.UPDATE)
    assert task_in.changes() == {}


def test_update_only_reports_set_fields():
    _, task_in = validate_request(
        payload={"status": "completed", "ignored": 1}, mode=ValidationMode.UPDATE
    )
    assert task_in.changes() == {"status": "completed"}


def test_update_title_message_differs_from_create():
    violations = check_task_payload({"title": ""}, ValidationMode.UPDATE)
    assert violations[0].message == "Title must be between 1 and 255 characters"


@pytest.mark.parametrize("field", ["title", "status", "due_date"])
def test_update_rejects_null_for_required_fields(field):
    assert _fields(check_task_payload({field: None}, ValidationMode.UPDATE)) == [field]


def test_update_allows_clearing_description():
    _, task_in = validate_request(payload={"description": None}, mode=ValidationMode.UPDATE)
    assert task_in.changes() == {"description": None}


# ============================================================
# STATUS-ONLY MODE
# ============================================================

def test_status_only_ignores_other_fields():
    assert check_task_payload({"status": "completed", "title": ""}, ValidationMode.STATUS_ONLY) == []


@pytest.mark.parametrize("payload", [{}, {"status": "done"}, {"status": None}, None])
def test_status_only_requires_valid_status(payload):
    violations = check_task_payload(payload, ValidationMode.STATUS_ONLY)
    assert _fields(violations) == ["status"]
    assert violations[0].message == "Valid status is required (pending, in_progress, completed, cancelled)"


# ============================================================
# IDENTIFIERS
# ============================================================

@pytest.mark.parametrize("raw", ["1", "42", 7, str(2**63 - 1)])
def test_valid_ids(raw):
    assert check_task_id(raw) == []


@pytest.mark.parametrize("raw", ["0", "-1", "abc", "1.5", "", " 3", "5\n", str(2**63), 0, True])
def test_invalid_ids(raw):
    violations = check_task_id(raw)
    assert _fields(violations) == ["id"]
    assert violations[0].message == ID_MESSAGE


def test_validate_request_reports_id_before_fields():
    with pytest.raises(ValidationFault) as exc_info:
        validate_request(raw_id="abc", payload={"status": "nope"}, mode=ValidationMode.UPDATE)
    assert _fields(exc_info.value.violations) == ["id", "status"]


def test_validate_request_returns_parsed_id():
    task_id, model = validate_request(raw_id="15")
    assert task_id == 15
    assert model is None
