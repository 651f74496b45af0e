from __future__ import annotations

import logging
import math
from datetime import timedelta

import pytest
from pydantic import ValidationError

from builders import NOW, at, day, make_done, make_session, make_task
from core.engine import InsightEngine, analyze
from core.models import Insight
from core.rules import RULES, RuleContext
from core.windows import DateWindows, FixedClock
from shared.enums import InsightType
from shared.schemas import Task


def _busy_snapshot() -> tuple[list, list]:
    tasks = [make_done(at(i % 9, hour=7 + i % 12), priority=("high", "low", "medium")[i % 3]) for i in range(18)]
    tasks += [make_task(created=at(age), due=day(age - 2), priority="high") for age in (3, 9, 12, 33, 40)]
    sessions = [make_session(i, duration=40 + 5 * i) for i in range(10)]
    return tasks, sessions


def test_empty_snapshot_yields_no_insights(clock: FixedClock) -> None:
    assert analyze([], [], clock=clock) == []


def test_analyze_is_deterministic_for_a_pinned_clock(clock: FixedClock) -> None:
    tasks, sessions = _busy_snapshot()

    first = analyze(tasks, sessions, clock=clock)
    second = analyze(tasks, sessions, clock=clock)

    assert first
    assert first == second
    assert [item.model_dump() for item in first] == [item.model_dump() for item in second]


def test_analyze_does_not_mutate_inputs(clock: FixedClock) -> None:
    tasks, sessions = _busy_snapshot()
    before_tasks = [task.model_dump() for task in tasks]
    before_sessions = [session.model_dump() for session in sessions]
    task_ids = [id(task) for task in tasks]

    analyze(tasks, sessions, clock=clock)

    assert [task.model_dump() for task in tasks] == before_tasks
    assert [session.model_dump() for session in sessions] == before_sessions
    assert [id(task) for task in tasks] == task_ids


def test_records_and_insights_are_frozen(clock: FixedClock) -> None:
    task = make_task()
    insight = analyze([task], [], clock=clock)[0]

    with pytest.raises(ValidationError):
        task.status = "completed"  # type: ignore[misc]
    with pytest.raises(ValidationError):
        insight.title = "changed"  # type: ignore[misc]


def test_insights_follow_rule_declaration_order(clock: FixedClock) -> None:
    tasks, sessions = _busy_snapshot()
    rule_names = [rule.__name__ for rule in RULES]

    insights = analyze(tasks, sessions, clock=clock)
    positions = [rule_names.index(item.rule) for item in insights]

    assert positions == sorted(positions)
    assert len({item.rule for item in insights}) > 3


def test_analyze_matches_each_rule_run_alone(clock: FixedClock) -> None:
    tasks, sessions = _busy_snapshot()
    context = RuleContext(
        tasks=tuple(tasks),
        focus_sessions=tuple(sessions),
        windows=DateWindows.from_clock(clock),
        now=clock.now(),
    )

    expected: list[Insight] = []
    for rule in RULES:
        expected.extend(rule(context))

    assert analyze(tasks, sessions, clock=clock) == expected


def test_removing_data_only_changes_rules_that_read_it(clock: FixedClock) -> None:
    tasks, sessions = _busy_snapshot()
    task_only_rules = {"working_time_pattern", "missed_deadlines", "completion_rate", "procrastination"}

    with_sessions = [item for item in analyze(tasks, sessions, clock=clock) if item.rule in task_only_rules]
    without_sessions = [item for item in analyze(tasks, [], clock=clock) if item.rule in task_only_rules]

    assert with_sessions == without_sessions


def test_messages_never_contain_non_finite_numbers(clock: FixedClock) -> None:
    snapshots = [
        ([], [make_session(30)]),
        ([make_task()], []),
        ([make_done(at(1)) for _ in range(5)], []),
        ([Task.model_validate({"id": "bare", "status": "completed"})], [make_session(0, duration=1)]),
    ]
    for tasks, sessions in snapshots:
        for insight in analyze(tasks, sessions, clock=clock):
            lowered = insight.message.lower()
            assert "nan" not in lowered.split()
            assert "infinity" not in lowered
            assert "inf%" not in lowered
            for value in insight.evidence.values():
                if isinstance(value, float):
                    assert math.isfinite(value)


def test_clock_moves_the_windows() -> None:
    tasks = [make_task(due=(NOW - timedelta(days=1)).date())]

    today = analyze(tasks, [], clock=FixedClock(NOW))
    month_later = analyze(tasks, [], clock=FixedClock(NOW + timedelta(days=40)))

    assert "Deadline Alert" in [item.title for item in today]
    assert "Deadline Alert" not in [item.title for item in month_later]


def test_engine_accepts_a_custom_rule_battery(clock: FixedClock) -> None:
    def always(context: RuleContext) -> list[Insight]:
        return [
            Insight(
                type=InsightType.INFO,
                icon="i",
                title="Snapshot size",
                message=f"{len(context.tasks)} tasks on {context.today.isoformat()}",
                rule="always",
            )
        ]

    engine = InsightEngine(clock=clock, rules=[always])

    assert [item.message for item in engine.analyze([make_task()], [])] == ["1 tasks on 2024-06-12"]
    assert engine.analyze([], []) == engine.analyze([], [])


def test_engine_defaults_to_the_system_clock() -> None:
    engine = InsightEngine()

    assert engine.analyze([], []) == []
    assert engine.rules == RULES


def test_every_rule_is_traced_at_debug(clock: FixedClock, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="core.engine"):
        analyze([], [], clock=clock)

    traced = [record.args[0] for record in caplog.records if record.msg.startswith("rule ")]
    assert traced == [rule.__name__ for rule in RULES]
