"""Task and week schemas for the weekly planner API."""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TASK_TEXT_MAX_LENGTH = 100
DAYS_PER_WEEK = 7


class TaskStatus(str, Enum):
    """Task status. ``UNSET`` is what gets stored when no status was picked."""

    COMPLETED = "Completed"
    ABANDONED = "Abandoned"
    IN_PROCESS = "In Process"
    UNSET = "No status"


def _normalize_text(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


# "default" is what an untouched status picker submits
UNSET_STATUS_VALUES = (None, "", "default")


def normalize_status(value: Any) -> Any:
    return TaskStatus.UNSET if value in UNSET_STATUS_VALUES else value


class TaskItem(BaseModel):
    """A single task inside a day list."""

    id: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1, max_length=TASK_TEXT_MAX_LENGTH)
    status: TaskStatus = TaskStatus.UNSET

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _normalize_text(value)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value: Any) -> Any:
        return normalize_status(value)

    def to_document(self) -> Dict[str, str]:
        """Plain dict as stored inside a week document."""
        return {"id": self.id, "text": self.text, "status": self.status.value}


class TaskUpdate(BaseModel):
    """Body of PUT /api/tasks/{weekKey}/{dayIndex}/{taskId}."""
    text: str = Field(..., min_length=1, max_length=TASK_TEXT_MAX_LENGTH)
    status: TaskStatus = TaskStatus.UNSET

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _normalize_text(value)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value: Any) -> Any:
        return normalize_status(value)


class WeekPayload(BaseModel):
    """Body of POST /api/tasks/{weekKey}. ``days`` is checked by the week service."""
    days: Optional[Any] = None


class WeekSaveResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    week_key: str = Field(..., alias="weekKey")
    days: Dict[str, List[TaskItem]]


class TaskResponse(BaseModel):
    success: bool = True
    task: TaskItem


class TaskDeleteResponse(BaseModel):
    success: bool = True
    days: Dict[str, List[TaskItem]]


class ClearResponse(BaseModel):
    cleared: bool = True
