import re
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from . import schemas
from .errors import FieldViolation, ValidationFault

MAX_TASK_ID = 2**63 - 1

_DIGITS = re.compile(r"[0-9]+")

_STATUS_CHOICES = ", ".join(s.value for s in schemas.TaskStatus)

ID_MESSAGE = "ID must be a positive integer"
BODY_MESSAGE = "Request body must be a JSON object"


class ValidationMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    STATUS_ONLY = "status-only"


_MODELS = {
    ValidationMode.CREATE: schemas.TaskCreate,
    ValidationMode.UPDATE: schemas.TaskUpdate,
    ValidationMode.STATUS_ONLY: schemas.TaskStatusUpdate,
}

_FIELD_MESSAGES: Dict[ValidationMode, Dict[str, str]] = {
    ValidationMode.CREATE: {
        "title": "Title is required and must be between 1 and 255 characters",
        "description": "Description must not exceed 1000 characters",
        "status": f"Status must be one of: {_STATUS_CHOICES}",
        "due_date": "Due date must be a valid ISO 8601 date",
    },
    ValidationMode.UPDATE: {
        "title": "Title must be between 1 and 255 characters",
        "description": "Description must not exceed 1000 characters",
        "status": f"Status must be one of: {_STATUS_CHOICES}",
        "due_date": "Due date must be a valid ISO 8601 date",
    },
    ValidationMode.STATUS_ONLY: {
        "status": f"Valid status is required ({_STATUS_CHOICES})",
    },
}


def violations_from_errors(errors: List[dict], mode: Optional[ValidationMode] = None) -> List[FieldViolation]:
    """Collapse pydantic error dicts into one violation per field, in order."""
    messages = _FIELD_MESSAGES.get(mode, {})
    seen = set()
    violations = []
    for err in errors:
        loc = [part for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        field = str(loc[0]) if loc and err.get("type") != "json_invalid" else "body"
        if field in seen:
            continue
        seen.add(field)
        violations.append(FieldViolation(field, messages.get(field, err.get("msg", "Invalid value"))))
    return violations


def _parse_payload(payload: Any, mode: ValidationMode) -> Tuple[Optional[BaseModel], List[FieldViolation]]:
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return None, [FieldViolation("body", BODY_MESSAGE)]
    try:
        return _MODELS[mode].model_validate(payload), []
    except ValidationError as exc:
        return None, violations_from_errors(exc.errors(), mode)


def _parse_task_id(raw: Any) -> Tuple[Optional[int], List[FieldViolation]]:
    if isinstance(raw, bool):
        return None, [FieldViolation("id", ID_MESSAGE)]
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _DIGITS.fullmatch(raw):
        value = int(raw)
    else:
        return None, [FieldViolation("id", ID_MESSAGE)]
    if not 1 <= value <= MAX_TASK_ID:
        return None, [FieldViolation("id", ID_MESSAGE)]
    return value, []


def check_task_payload(payload: Any, mode: ValidationMode) -> List[FieldViolation]:
    return _parse_payload(payload, ValidationMode(mode))[1]


def check_task_id(raw: Any) -> List[FieldViolation]:
    return _parse_task_id(raw)[1]


def validate_request(*, raw_id: Any = None, payload: Any = None, mode: Optional[ValidationMode] = None):
    """Return ``(task_id, model)`` or raise ``ValidationFault`` (id violation first)."""
    task_id, model = None, None
    violations: List[FieldViolation] = []

    if raw_id is not None:
        task_id, id_violations = _parse_task_id(raw_id)
        violations.extend(id_violations)

    if mode is not None:
        model, field_violations = _parse_payload(payload, ValidationMode(mode))
        violations.extend(field_violations)

    if violations:
        raise ValidationFault(violations)
    return task_id, model
