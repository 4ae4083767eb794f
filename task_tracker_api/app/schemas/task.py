"""
Pydantic models for personal tasks.

``TaskWrite`` is the body accepted by both create and update: all four
business fields are required on every write, there is no partial
update.  ``TaskRead`` is what the API returns.  System‑managed fields
(``id``, ``user_id`` and the timestamps) are never read from client
input; unknown keys in a request body are ignored.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class TaskStatus(str, Enum):
    """Progress of a task.

    Any status may be changed to any other; there is no enforced
    workflow order.
    """

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskWrite(BaseModel):
    """Schema for creating or replacing a task."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Write report"])
    description: str = Field(..., min_length=1, max_length=1000, examples=["Q3 summary"])
    due_date: date = Field(..., examples=["2024-08-01"])
    status: TaskStatus = Field(..., examples=["NOT_STARTED"])

    # Surrounding whitespace is dropped before the length checks, so a
    # title of only spaces counts as empty.
    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

    @field_validator("due_date", mode="before")
    @classmethod
    def due_date_must_be_text(cls, value):
        # Lax date parsing would read JSON numbers and digit strings as
        # UNIX timestamps.
        if isinstance(value, date):
            return value
        if not isinstance(value, str) or value.strip().lstrip("+-").replace(".", "", 1).isdigit():
            raise ValueError("Due date must be a date string such as 2024-08-01")
        return value.strip()


class TaskRead(BaseModel):
    """Schema for a task returned by the API.

    ``user_id`` identifies the owner; only that user can see or modify
    the task.
    """

    id: int
    user_id: int
    title: str
    description: str
    due_date: date
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }
