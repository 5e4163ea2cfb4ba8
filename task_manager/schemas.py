from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from dateutil.parser import isoparse
from pydantic import BaseModel, Field, field_serializer, field_validator


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def format_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _strip_title(v: Any) -> Any:
    return v.strip() if isinstance(v, str) else v


def _parse_due_date(v: Any) -> datetime:
    if not isinstance(v, (str, datetime)):
        raise ValueError("due_date must be an ISO 8601 string")
    try:
        parsed = v if isinstance(v, datetime) else isoparse(v)
        return to_utc_naive(parsed)
    except (ValueError, OverflowError) as exc:
        raise ValueError("due_date is not a valid ISO 8601 date") from exc


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    status: TaskStatus
    due_date: datetime

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        return _strip_title(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v):
        return _parse_due_date(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None

    # Defaults are not validated, so these only fire on an explicit null.
    @field_validator("title", "status", "due_date", mode="before")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("field may not be null")
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        return _strip_title(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v):
        return _parse_due_date(v)

    def changes(self) -> dict:
        """Fields set in the payload, with the status flattened to its value."""
        data = self.model_dump(exclude_unset=True)
        if data.get("status") is not None:
            data["status"] = data["status"].value
        return data


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: datetime
    created_at: datetime
    updated_at: datetime

    @field_serializer("due_date", "created_at", "updated_at")
    def _timestamps(self, value: datetime) -> str:
        return format_utc(value)
