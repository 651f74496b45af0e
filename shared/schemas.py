from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.enums import Priority, TaskStatus


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Task(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str | int | float
    title: str = ""
    priority: Priority = Priority.MEDIUM
    due_date: date | None = Field(default=None, alias="dueDate")
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime | None = Field(default=None, alias="createdAt")
    completed_at: datetime | None = Field(default=None, alias="completedAt")

    @field_validator("due_date", "created_at", "completed_at", mode="before")
    @classmethod
    def blank_dates_are_missing(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING


class FocusSession(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str | int | float
    duration: int = Field(gt=0)
    day: date = Field(alias="date")
    timestamp: datetime | None = None


class Snapshot(BaseModel):
    """The read-only (tasks, focus sessions) pair handed to one analysis run."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    tasks: list[Task] = Field(default_factory=list)
    focus_sessions: list[FocusSession] = Field(default_factory=list, alias="focusSessions")
