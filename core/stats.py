from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from core.models import DailyPoint, DashboardStats, OverviewStats, TimerStats, WeeklySummary
from core.windows import Clock, DateWindows, SystemClock, date_of, format_fixed, percent_of
from shared.enums import Priority, TaskStatus
from shared.schemas import FocusSession, Task

_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def _hours(minutes: float) -> float:
    return float(format_fixed(minutes / 60, 1))


def is_overdue(task: Task, today: date) -> bool:
    if task.due_date is None or task.is_completed:
        return False
    return task.due_date < today


def overdue_tasks(tasks: Iterable[Task], today: date) -> list[Task]:
    return [task for task in tasks if is_overdue(task, today)]


def tasks_due_today(tasks: Iterable[Task], today: date, limit: int = 5) -> list[Task]:
    return [task for task in tasks if task.due_date == today][:limit]


def sorted_tasks(tasks: Iterable[Task], status: TaskStatus | None = None) -> list[Task]:
    """Task list order: high priority first, then earliest due date; undated tasks last."""
    selected = [task for task in tasks if status is None or task.status == status]
    return sorted(
        selected,
        key=lambda task: (_PRIORITY_RANK[task.priority], task.due_date is None, task.due_date or date.max),
    )


def overview_stats(tasks: list[Task], sessions: list[FocusSession], windows: DateWindows) -> OverviewStats:
    total = len(tasks)
    completed = sum(1 for task in tasks if task.is_completed)
    today_minutes = sum(session.duration for session in sessions if session.day == windows.today)
    return OverviewStats(
        total_tasks=total,
        completed_tasks=completed,
        today_focus_minutes=today_minutes,
        today_focus_hours=_hours(today_minutes),
        productivity_percent=percent_of(completed, total),
    )


def weekly_summary(tasks: list[Task], sessions: list[FocusSession], windows: DateWindows) -> WeeklySummary:
    week = windows.last_7
    completed = sum(1 for task in tasks if task.is_completed and date_of(task.completed_at) in week)
    created = sum(1 for task in tasks if date_of(task.created_at) in week)
    focus_minutes = sum(session.duration for session in sessions if session.day in week)
    return WeeklySummary(
        completed=completed,
        created=created,
        completion_rate=percent_of(completed, created),
        focus_minutes=focus_minutes,
        focus_hours=_hours(focus_minutes),
        avg_daily_focus_hours=_hours(focus_minutes / 7),
    )


def daily_series(tasks: list[Task], sessions: list[FocusSession], windows: DateWindows) -> list[DailyPoint]:
    points: list[DailyPoint] = []
    for day in windows.last_7:
        points.append(
            DailyPoint(
                day=day,
                completed=sum(1 for task in tasks if task.is_completed and date_of(task.completed_at) == day),
                focus_minutes=sum(session.duration for session in sessions if session.day == day),
            )
        )
    return points


def timer_stats(sessions: list[FocusSession], windows: DateWindows) -> TimerStats:
    return TimerStats(
        sessions_today=sum(1 for session in sessions if session.day == windows.today),
        total_focus_minutes=sum(session.duration for session in sessions),
    )


def build_dashboard(
    tasks: Iterable[Task],
    focus_sessions: Iterable[FocusSession],
    clock: Clock | None = None,
) -> DashboardStats:
    task_list = list(tasks)
    session_list = list(focus_sessions)
    windows = DateWindows.from_clock(clock or SystemClock())
    return DashboardStats(
        today=windows.today,
        overview=overview_stats(task_list, session_list, windows),
        weekly=weekly_summary(task_list, session_list, windows),
        daily=daily_series(task_list, session_list, windows),
        timer=timer_stats(session_list, windows),
        overdue_task_ids=[task.id for task in overdue_tasks(task_list, windows.today)],
        due_today_task_ids=[task.id for task in tasks_due_today(task_list, windows.today)],
    )
