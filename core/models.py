from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shared.enums import InsightType


class Insight(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: InsightType
    icon: str
    title: str
    message: str
    rule: str
    evidence: dict[str, Any] = Field(default_factory=dict)


class OverviewStats(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    total_tasks: int = Field(ge=0)
    completed_tasks: int = Field(ge=0)
    today_focus_minutes: int = Field(ge=0)
    today_focus_hours: float = Field(ge=0)
    productivity_percent: int = Field(ge=0, le=100)


class WeeklySummary(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    completed: int = Field(ge=0)
    created: int = Field(ge=0)
    completion_rate: int = Field(ge=0)
    focus_minutes: int = Field(ge=0)
    focus_hours: float = Field(ge=0)
    avg_daily_focus_hours: float = Field(ge=0)


class DailyPoint(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    day: date
    completed: int = Field(ge=0)
    focus_minutes: int = Field(ge=0)


class TimerStats(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    sessions_today: int = Field(ge=0)
    total_focus_minutes: int = Field(ge=0)


class DashboardStats(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    today: date
    overview: OverviewStats
    weekly: WeeklySummary
    daily: list[DailyPoint]
    timer: TimerStats
    overdue_task_ids: list[str | int | float] = Field(default_factory=list)
    due_today_task_ids: list[str | int | float] = Field(default_factory=list)
