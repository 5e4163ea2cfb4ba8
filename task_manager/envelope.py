"""Uniform response bodies for every API outcome."""

from typing import Any, Iterable, Optional

from pydantic import BaseModel

from .errors import NotFoundFault, StorageFault, TaskFault, ValidationFault


def _jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    return data


def success(data: Any, message: Optional[str] = None, count: Optional[int] = None) -> dict:
    body = {"success": True, "data": _jsonable(data)}
    if message is not None:
        body["message"] = message
    if count is not None:
        body["count"] = count
    return body


def validation_failed(violations: Iterable) -> dict:
    return {
        "success": False,
        "error": ValidationFault.error,
        "details": [{"field": v.field, "message": v.message} for v in violations],
    }


def from_fault(fault: TaskFault) -> dict:
    if isinstance(fault, ValidationFault):
        return validation_failed(fault.violations)
    if isinstance(fault, StorageFault):
        return {"success": False, "error": fault.error, "message": fault.detail}
    if isinstance(fault, NotFoundFault):
        return {"success": False, "error": NotFoundFault.error}
    return {"success": False, "error": fault.error}


def internal_error(detail: str, debug: bool = False) -> dict:
    return {
        "success": False,
        "error": "Internal server error",
        "message": detail if debug else "Something went wrong",
    }
