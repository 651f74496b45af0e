from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from core.models import Insight
from core.windows import DateWindow, DateWindows, date_of, days_between, format_fixed, local_time, percent_of
from shared.enums import InsightType, Priority
from shared.schemas import FocusSession, Task


@dataclass(frozen=True, slots=True)
class RuleContext:
    tasks: tuple[Task, ...]
    focus_sessions: tuple[FocusSession, ...]
    windows: DateWindows
    now: datetime

    @property
    def today(self) -> date:
        return self.windows.today

    def local(self, value: datetime) -> datetime:
        """`value` as seen on the reference clock, for hour and weekday buckets."""
        return local_time(value, self.now)


Rule = Callable[[RuleContext], list[Insight]]


def _insight(
    rule: str,
    insight_type: InsightType,
    icon: str,
    title: str,
    message: str,
    **evidence: Any,
) -> Insight:
    return Insight(type=insight_type, icon=icon, title=title, message=message, rule=rule, evidence=evidence)


def _completed_on(task: Task) -> date | None:
    if not task.is_completed:
        return None
    return date_of(task.completed_at)


def _completed_within(tasks: tuple[Task, ...], window: DateWindow) -> int:
    return sum(1 for task in tasks if _completed_on(task) in window)


def _focus_within(sessions: tuple[FocusSession, ...], window: DateWindow) -> int:
    return sum(session.duration for session in sessions if session.day in window)


def working_time_pattern(ctx: RuleContext) -> list[Insight]:
    completed = [task for task in ctx.tasks if task.is_completed and task.completed_at is not None]
    total = len(completed)
    if total < 5:
        return []

    morning = afternoon = evening = night = 0
    for task in completed:
        hour = ctx.local(task.completed_at).hour  # type: ignore[arg-type]
        if 6 <= hour < 12:
            morning += 1
        elif 12 <= hour < 18:
            afternoon += 1
        elif hour >= 18:
            evening += 1
        else:
            night += 1

    evidence = {
        "total": total,
        "morning": morning,
        "afternoon": afternoon,
        "evening": evening,
        "night": night,
        "morning_percent": percent_of(morning, total),
        "afternoon_percent": percent_of(afternoon, total),
        "evening_percent": percent_of(evening, total),
    }
    name = "working_time_pattern"

    # first period holding at least 40% wins: morning, then afternoon, then evening
    if morning * 100 >= 40 * total:
        return [
            _insight(
                name,
                InsightType.SUCCESS,
                "🌅",
                "Morning Productivity Peak",
                f"{evidence['morning_percent']}% of your tasks are completed before noon. You're a morning person! "
                "Schedule important work between 6 AM - 12 PM for best results.",
                period="morning",
                **evidence,
            )
        ]
    if afternoon * 100 >= 40 * total:
        return [
            _insight(
                name,
                InsightType.INFO,
                "☀️",
                "Afternoon Productivity Peak",
                f"{evidence['afternoon_percent']}% of your tasks are completed in the afternoon. "
                "Your peak hours are 12 PM - 6 PM. Plan demanding tasks during this window.",
                period="afternoon",
                **evidence,
            )
        ]
    if evening * 100 >= 40 * total:
        return [
            _insight(
                name,
                InsightType.INFO,
                "🌙",
                "Evening Productivity Peak",
                f"{evidence['evening_percent']}% of your tasks are completed in the evening. "
                "You work best after 6 PM. Embrace your night owl nature!",
                period="evening",
                **evidence,
            )
        ]
    if night > 5:
        return [
            _insight(
                name,
                InsightType.WARNING,
                "🦉",
                "Late Night Work Pattern",
                f"You've completed {night} tasks between midnight and 6 AM. "
                "Consider shifting your schedule for better health and productivity.",
                period="night",
                **evidence,
            )
        ]
    return []


def missed_deadlines(ctx: RuleContext) -> list[Insight]:
    name = "missed_deadlines"
    overdue = [
        task
        for task in ctx.tasks
        if task.due_date is not None and not task.is_completed and task.due_date < ctx.today
    ]
    weekly = sum(1 for task in overdue if task.due_date in ctx.windows.last_7)
    monthly = sum(1 for task in overdue if task.due_date in ctx.windows.last_30)

    out: list[Insight] = []
    if weekly > 3:
        out.append(
            _insight(
                name,
                InsightType.DANGER,
                "⚠️",
                "Critical: Frequent Missed Deadlines",
                f"You've missed {weekly} deadlines this week. Action needed: Break tasks into smaller chunks, "
                "extend deadlines, or reduce commitments.",
                weekly_missed=weekly,
            )
        )
    elif weekly > 0:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "📅",
                "Deadline Alert",
                f"{weekly} deadline(s) missed this week. Review your task load and adjust priorities.",
                weekly_missed=weekly,
            )
        )

    if monthly > 10:
        out.append(
            _insight(
                name,
                InsightType.DANGER,
                "🚨",
                "Chronic Deadline Issues",
                f"{monthly} missed deadlines this month. This pattern suggests overcommitment. Consider: "
                "1) Setting more realistic deadlines, 2) Saying no to new tasks, 3) Delegating when possible.",
                monthly_missed=monthly,
            )
        )

    on_time = sum(
        1
        for task in ctx.tasks
        if task.is_completed
        and task.due_date is not None
        and task.completed_at is not None
        and task.completed_at.date() <= task.due_date
    )
    if on_time >= 10 and weekly == 0:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "🎯",
                "Deadline Master",
                f"Perfect! {on_time} tasks completed on time with zero missed deadlines. "
                "Your time management is excellent!",
                completed_on_time=on_time,
            )
        )
    return out


def focus_time(ctx: RuleContext) -> list[Insight]:
    name = "focus_time"
    sessions = ctx.focus_sessions
    has_history = len(sessions) > 0
    today_minutes = sum(session.duration for session in sessions if session.day == ctx.today)
    weekly_minutes = _focus_within(sessions, ctx.windows.last_7)
    avg_daily = weekly_minutes / 7

    out: list[Insight] = []
    if avg_daily < 60 and has_history:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "⏱️",
                "Low Focus Time Detected",
                f"Your average daily focus is {format_fixed(avg_daily)} minutes. Aim for at least 2 Pomodoro "
                "sessions (50 min) daily. Start with one 25-minute session today!",
                avg_daily_minutes=round(avg_daily, 2),
            )
        )

    if today_minutes == 0 and has_history:
        out.append(
            _insight(
                name,
                InsightType.INFO,
                "🎯",
                "Start Your Focus Session",
                "You haven't started any focus sessions today. Begin with just one 25-minute Pomodoro "
                "to build momentum!",
                today_minutes=today_minutes,
            )
        )

    if avg_daily >= 120:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "🔥",
                "Deep Work Champion",
                f"Outstanding! {format_fixed(avg_daily / 60, 1)} hours of daily focus time. "
                "You're in the top 5% of productive people. Keep this momentum!",
                avg_daily_minutes=round(avg_daily, 2),
            )
        )

    recent = _focus_within(sessions, ctx.windows.last_7.tail(3))
    previous = _focus_within(sessions, ctx.windows.last_7.head(4))
    if previous > 0 and recent * 2 < previous:
        drop = percent_of(previous - recent, previous)
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "📉",
                "Focus Time Declining",
                f"Your focus time dropped by {drop}% this week. "
                "Identify distractions and schedule dedicated focus blocks.",
                recent_minutes=recent,
                previous_minutes=previous,
                decline_percent=drop,
            )
        )
    return out


def completion_rate(ctx: RuleContext) -> list[Insight]:
    name = "completion_rate"
    total = len(ctx.tasks)
    if total == 0:
        return []

    completed = sum(1 for task in ctx.tasks if task.is_completed)
    rate = percent_of(completed, total)
    weekly_created = sum(1 for task in ctx.tasks if date_of(task.created_at) in ctx.windows.last_7)
    weekly_completed = _completed_within(ctx.tasks, ctx.windows.last_7)
    evidence = {"total": total, "completed": completed, "rate_percent": rate}

    out: list[Insight] = []
    # brackets compare exact ratios; 70-80% intentionally has no message
    if completed * 100 < 30 * total:
        if total >= 10:
            out.append(
                _insight(
                    name,
                    InsightType.DANGER,
                    "📊",
                    "Low Completion Rate Alert",
                    f"Only {rate}% of tasks completed. You're creating tasks faster than completing them. "
                    "Try: 1) Limit new tasks, 2) Delete unnecessary tasks, 3) Break large tasks into smaller ones.",
                    **evidence,
                )
            )
    elif completed * 100 < 50 * total:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "💡",
                "Improve Task Completion",
                f"{rate}% completion rate. Focus on finishing existing tasks before adding new ones. "
                "Use the 2-minute rule: if it takes < 2 minutes, do it now!",
                **evidence,
            )
        )
    elif completed * 100 < 70 * total:
        out.append(
            _insight(
                name,
                InsightType.INFO,
                "📈",
                "Good Progress",
                f"{rate}% completion rate - you're making solid progress! "
                "Push to 80%+ by tackling 2-3 quick wins today.",
                **evidence,
            )
        )
    elif completed * 100 >= 80 * total:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "⭐",
                "Exceptional Completion Rate",
                f"{rate}% completion rate! You're excellent at finishing what you start. "
                "This discipline sets you apart.",
                **evidence,
            )
        )

    if weekly_created > weekly_completed * 2 and weekly_created > 5:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "⚖️",
                "Task Creation Imbalance",
                f"You created {weekly_created} tasks but completed only {weekly_completed} this week. "
                "Pause adding new tasks and focus on your existing list.",
                weekly_created=weekly_created,
                weekly_completed=weekly_completed,
            )
        )
    return out


def productivity_streak(ctx: RuleContext) -> list[Insight]:
    name = "productivity_streak"
    daily = {day: 0 for day in ctx.windows.last_7}
    for task in ctx.tasks:
        day = _completed_on(task)
        if day in daily:
            daily[day] += 1  # type: ignore[index]

    productive_days = sum(1 for count in daily.values() if count > 0)
    total_completed = sum(daily.values())
    zero_days = len(daily) - productive_days
    has_tasks = len(ctx.tasks) > 0

    out: list[Insight] = []
    if productive_days >= 5:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "🔥",
                "Productivity Streak Active",
                f"{productive_days} productive days this week! You're building a powerful habit. "
                "Consistency beats intensity.",
                productive_days=productive_days,
            )
        )
    if total_completed >= 10:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "🚀",
                "High Output Week",
                f"{total_completed} tasks completed this week! You're crushing it. "
                "This momentum will compound over time.",
                total_completed=total_completed,
            )
        )
    if productive_days < 2 and has_tasks:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "📅",
                "Build Consistency",
                f"Only {productive_days} productive day(s) this week. Aim for at least one task daily. "
                "Small daily wins create big results.",
                productive_days=productive_days,
            )
        )
    if zero_days >= 3 and (has_tasks or ctx.focus_sessions):
        out.append(
            _insight(
                name,
                InsightType.DANGER,
                "⏰",
                "Productivity Gap Detected",
                f"{zero_days} days with zero completed tasks. Break the pattern today with just ONE small task. "
                "Momentum starts with action.",
                zero_days=zero_days,
            )
        )
    return out


def task_overload(ctx: RuleContext) -> list[Insight]:
    name = "task_overload"
    pending = [task for task in ctx.tasks if task.is_pending]
    high = sum(1 for task in pending if task.priority == Priority.HIGH)
    due_today = sum(1 for task in pending if task.due_date == ctx.today)

    out: list[Insight] = []
    if high >= 5:
        out.append(
            _insight(
                name,
                InsightType.DANGER,
                "🚨",
                "High Priority Overload",
                f"{high} high-priority tasks pending. Everything can't be urgent. "
                "Re-evaluate: What's truly critical? Downgrade or delegate the rest.",
                pending_high=high,
            )
        )
    if due_today >= 10:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "📋",
                "Today's Task Overload",
                f"{due_today} tasks due today - that's unrealistic. Pick your top 3 must-dos "
                "and reschedule the rest. Quality over quantity.",
                due_today=due_today,
            )
        )
    if len(pending) >= 20:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "📚",
                "Task List Bloat",
                f"{len(pending)} pending tasks. Your list is overwhelming. Archive completed tasks, "
                "delete unnecessary ones, and focus on top 5 priorities.",
                pending=len(pending),
            )
        )
    if not out and 0 < len(pending) <= 10 and high <= 3:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "✅",
                "Healthy Task Load",
                f"{len(pending)} pending tasks with {high} high-priority items. "
                "Your workload is manageable and well-prioritized!",
                pending=len(pending),
                pending_high=high,
            )
        )
    return out


def procrastination(ctx: RuleContext) -> list[Insight]:
    name = "procrastination"
    ages = [
        days_between(task.created_at.date(), ctx.today)
        for task in ctx.tasks
        if task.is_pending and task.created_at is not None
    ]
    old = [age for age in ages if age >= 7]
    very_old = [age for age in old if age >= 30]

    out: list[Insight] = []
    if len(old) >= 3:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "🐌",
                "Procrastination Pattern Detected",
                f'{len(old)} tasks have been pending for 7+ days. These are your "avoidance tasks". '
                "Either: 1) Break them down, 2) Schedule specific time, or 3) Delete if not important.",
                old_tasks=len(old),
            )
        )
    if very_old:
        out.append(
            _insight(
                name,
                InsightType.DANGER,
                "⏳",
                "Chronic Procrastination Alert",
                f"{len(very_old)} task(s) pending for 30+ days. Be honest: Will you ever do these? "
                "If not, delete them. If yes, schedule them NOW.",
                very_old_tasks=len(very_old),
            )
        )
    return out


def work_life_balance(ctx: RuleContext) -> list[Insight]:
    name = "work_life_balance"
    weekend = weekday = 0
    for task in ctx.tasks:
        day = date_of(task.completed_at)
        if day is None or day not in ctx.windows.last_7:
            continue
        if ctx.local(task.completed_at).weekday() >= 5:  # type: ignore[arg-type]
            weekend += 1
        else:
            weekday += 1

    out: list[Insight] = []
    if weekend > weekday and weekend > 5:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "⚖️",
                "Weekend Work Pattern",
                f"You completed {weekend} tasks on weekends vs {weekday} on weekdays. "
                "Ensure you're taking proper rest. Burnout prevention is productivity.",
                weekend=weekend,
                weekday=weekday,
            )
        )
    if weekday > 0 and weekend == 0:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "🌴",
                "Healthy Work-Life Balance",
                "Great! You kept weekends task-free. Rest and recovery are essential for sustained productivity.",
                weekend=weekend,
                weekday=weekday,
            )
        )
    return out


def priority_pattern(ctx: RuleContext) -> list[Insight]:
    name = "priority_pattern"
    completed = [task for task in ctx.tasks if task.is_completed]
    if len(completed) < 5:
        return []

    high = sum(1 for task in completed if task.priority == Priority.HIGH)
    low = sum(1 for task in completed if task.priority == Priority.LOW)

    out: list[Insight] = []
    if low > high * 2 and high > 0:
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "🎯",
                "Priority Misalignment",
                f"You're completing {low} low-priority tasks vs {high} high-priority. "
                "Focus on what matters most. Do the hard stuff first!",
                high_completed=high,
                low_completed=low,
            )
        )
    if high >= 5 and high > low:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "🏆",
                "Priority Master",
                f"Excellent! You're tackling high-priority tasks first ({high} completed). "
                "This is how top performers work.",
                high_completed=high,
                low_completed=low,
            )
        )
    return out


def consistency(ctx: RuleContext) -> list[Insight]:
    name = "consistency"
    first = _completed_within(ctx.tasks, ctx.windows.last_14.head(7))
    second = _completed_within(ctx.tasks, ctx.windows.last_14.tail(7))

    out: list[Insight] = []
    if second > first and second >= 5:
        if first > 0:
            improvement = percent_of(second - first, first)
            message = (
                f"You're improving! {improvement}% more tasks completed this week vs last week. "
                "This growth mindset will take you far."
            )
        else:
            improvement = None
            message = (
                f"You're improving! {second} tasks completed this week after none last week. "
                "This growth mindset will take you far."
            )
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "📈",
                "Upward Trend Detected",
                message,
                previous_week=first,
                current_week=second,
                improvement_percent=improvement,
            )
        )
    if first > 0 and second * 10 < first * 7:
        decline = percent_of(first - second, first)
        out.append(
            _insight(
                name,
                InsightType.WARNING,
                "📉",
                "Productivity Decline",
                f"{decline}% fewer tasks completed this week. What changed? "
                "Identify obstacles and adjust your approach.",
                previous_week=first,
                current_week=second,
                decline_percent=decline,
            )
        )
    return out


def burnout_risk(ctx: RuleContext) -> list[Insight]:
    name = "burnout_risk"
    weekly_focus = _focus_within(ctx.focus_sessions, ctx.windows.last_7)
    weekly_completed = _completed_within(ctx.tasks, ctx.windows.last_7)
    pending_high = sum(1 for task in ctx.tasks if task.is_pending and task.priority == Priority.HIGH)
    evidence = {
        "weekly_focus_minutes": weekly_focus,
        "weekly_completed": weekly_completed,
        "pending_high": pending_high,
    }

    if weekly_focus > 600 and weekly_completed > 20 and pending_high > 5:
        return [
            _insight(
                name,
                InsightType.DANGER,
                "🔴",
                "Burnout Risk Warning",
                f"Red flag: {format_fixed(weekly_focus / 60)}h focus time, {weekly_completed} tasks completed, "
                f"{pending_high} high-priority pending. You're pushing too hard. "
                "Schedule rest days to prevent burnout.",
                **evidence,
            )
        ]
    if 180 <= weekly_focus <= 420 and 5 <= weekly_completed <= 15:
        return [
            _insight(
                name,
                InsightType.SUCCESS,
                "🌟",
                "Sustainable Pace",
                f"Perfect balance: {format_fixed(weekly_focus / 60, 1)}h focus, {weekly_completed} tasks completed. "
                "This is sustainable long-term productivity!",
                **evidence,
            )
        ]
    return []


def optimal_task_size(ctx: RuleContext) -> list[Insight]:
    name = "optimal_task_size"
    durations = [
        days_between(task.created_at.date(), task.completed_at.date())
        for task in ctx.tasks
        if task.created_at is not None and task.completed_at is not None
    ]
    quick = sum(1 for days in durations if days == 0)
    slow = sum(1 for days in durations if days >= 7)

    out: list[Insight] = []
    if quick > slow * 2 and quick >= 10:
        out.append(
            _insight(
                name,
                InsightType.SUCCESS,
                "⚡",
                "Quick Win Strategy",
                f"{quick} tasks completed same-day! You're great at breaking work into actionable chunks. "
                "This approach builds momentum.",
                quick=quick,
                slow=slow,
            )
        )
    if slow > quick and slow >= 5:
        out.append(
            _insight(
                name,
                InsightType.INFO,
                "🔨",
                "Break Down Large Tasks",
                f"{slow} tasks took 7+ days to complete. Try breaking large tasks into smaller, "
                "daily sub-tasks for faster progress and motivation.",
                quick=quick,
                slow=slow,
            )
        )
    return out


RULES: tuple[Rule, ...] = (
    working_time_pattern,
    missed_deadlines,
    focus_time,
    completion_rate,
    productivity_streak,
    task_overload,
    procrastination,
    work_life_balance,
    priority_pattern,
    consistency,
    burnout_risk,
    optimal_task_size,
)
