"""Shared record schemas for the task and focus tracker."""

from shared.enums import InsightType, Priority, TaskStatus
from shared.schemas import FocusSession, Snapshot, Task

__all__ = [
    "Task",
    "FocusSession",
    "Snapshot",
    "Priority",
    "TaskStatus",
    "InsightType",
]
