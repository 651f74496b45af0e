from __future__ import annotations

import argparse
from datetime import UTC, datetime, time, timedelta
from pathlib import Path

from core.engine import analyze
from core.windows import FixedClock
from focus_tracker.config import DEFAULT_CONFIG_PATH, ensure_app_paths, load_config
from shared.enums import Priority, TaskStatus
from shared.schemas import FocusSession, Snapshot, Task
from shared.serialization import canonical_json_text

_PRIORITIES = (Priority.HIGH, Priority.MEDIUM, Priority.MEDIUM, Priority.LOW)


def _ts_for_day(day: datetime, hour: int, minute: int) -> datetime:
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)


def _build_day(day: datetime, day_index: int, total_days: int) -> tuple[list[Task], list[FocusSession]]:
    tasks: list[Task] = []
    sessions: list[FocusSession] = []
    is_recent = day_index >= total_days - 7

    created_count = 3 if is_recent else 2
    for i in range(created_count):
        created = _ts_for_day(day, 8 + i, 5 * i)
        done = (day_index + i) % 3 != 0
        completed_at = _ts_for_day(day, 9 + i, 30) if done else None
        tasks.append(
            Task(
                id=f"demo-{day_index}-{i}",
                title=f"Demo task {day_index}.{i}",
                priority=_PRIORITIES[(day_index + i) % len(_PRIORITIES)],
                due_date=(day + timedelta(days=2)).date(),
                status=TaskStatus.COMPLETED if done else TaskStatus.PENDING,
                created_at=created,
                completed_at=completed_at,
            )
        )

    session_count = 2 if is_recent else 1
    for i in range(session_count):
        ts = _ts_for_day(day, 14 + i, 0)
        sessions.append(FocusSession(id=f"focus-{day_index}-{i}", duration=25, day=ts.date(), timestamp=ts))
    return tasks, sessions


def build_demo_snapshot(now: datetime, days: int = 21) -> Snapshot:
    start_day = datetime.combine(now.date() - timedelta(days=days - 1), time.min, tzinfo=UTC)
    tasks: list[Task] = []
    sessions: list[FocusSession] = []
    for i in range(days):
        day_tasks, day_sessions = _build_day(start_day + timedelta(days=i), i, days)
        tasks.extend(day_tasks)
        sessions.extend(day_sessions)
    return Snapshot(tasks=tasks, focus_sessions=sessions)


def seed_demo_data(config_path: Path, days: int) -> None:
    ensure_app_paths(config_path)
    config = load_config(config_path)

    now = datetime.now(UTC)
    snapshot = build_demo_snapshot(now, days=days)
    config.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    config.snapshot_path.write_text(canonical_json_text(snapshot, indent=2), encoding="utf-8")
    insights = analyze(snapshot.tasks, snapshot.focus_sessions, clock=FixedClock(now))

    print("Seed complete")
    print(f"Snapshot: {config.snapshot_path}")
    print(f"Tasks: {len(snapshot.tasks)}, focus sessions: {len(snapshot.focus_sessions)}")
    print(f"Insights: {len(insights)}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a deterministic demo snapshot for the focus tracker")
    parser.add_argument("--config", type=str, default=None, help="Path to config.toml")
    parser.add_argument("--days", type=int, default=21, help="Number of days to seed")
    args = parser.parse_args()

    config_path = Path(args.config).expanduser() if args.config else DEFAULT_CONFIG_PATH
    seed_demo_data(config_path=config_path, days=max(2, args.days))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
