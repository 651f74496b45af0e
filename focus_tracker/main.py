from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

import uvicorn

from core.engine import analyze
from core.models import Insight
from core.stats import build_dashboard, sorted_tasks
from core.windows import Clock, FixedClock, SystemClock, parse_timestamp
from focus_tracker.config import DEFAULT_CONFIG_PATH, AppConfig, ensure_app_paths, load_config
from focus_tracker.logging import configure_logging
from focus_tracker.storage import SnapshotError, load_snapshot
from focus_tracker.web.app import create_app
from shared.enums import TaskStatus
from shared.schemas import Task
from shared.serialization import canonical_json_text

logger = logging.getLogger("focus_tracker")


def _config_path(raw: str | None) -> Path:
    return Path(raw).expanduser() if raw else DEFAULT_CONFIG_PATH


def _load(config_path: str | None) -> AppConfig:
    path = _config_path(config_path)
    ensure_app_paths(path)
    return load_config(path)


def _clock(raw_now: str | None) -> Clock:
    if not raw_now:
        return SystemClock()
    return FixedClock(parse_timestamp(raw_now))


def _data_path(args: argparse.Namespace, config: AppConfig) -> Path:
    if getattr(args, "data", None):
        return Path(args.data).expanduser()
    return config.snapshot_path


def format_insight(insight: Insight) -> str:
    return f"[{insight.type.value.upper()}] {insight.icon} {insight.title}\n    {insight.message}"


def format_task(task: Task) -> str:
    due = f" (due {task.due_date.isoformat()})" if task.due_date else ""
    return f"[{task.priority.value.upper()}] {task.title or task.id}{due}"


def cmd_init(args: argparse.Namespace) -> int:
    config = _load(args.config)
    logger.info("initialized config at %s", _config_path(args.config))
    logger.info("snapshot path is %s", config.snapshot_path)
    return 0


def cmd_insights(args: argparse.Namespace, config: AppConfig) -> int:
    snapshot = load_snapshot(_data_path(args, config))
    insights = analyze(snapshot.tasks, snapshot.focus_sessions, clock=_clock(args.now))
    if args.format == "json":
        print(canonical_json_text(insights, indent=2))
        return 0
    if not insights:
        print("Keep using the app to get personalized insights!")
        return 0
    print("\n".join(format_insight(insight) for insight in insights))
    return 0


def cmd_stats(args: argparse.Namespace, config: AppConfig) -> int:
    snapshot = load_snapshot(_data_path(args, config))
    dashboard = build_dashboard(snapshot.tasks, snapshot.focus_sessions, clock=_clock(args.now))
    print(canonical_json_text(dashboard, indent=2))
    return 0


def cmd_tasks(args: argparse.Namespace, config: AppConfig) -> int:
    snapshot = load_snapshot(_data_path(args, config))
    status = TaskStatus(args.status) if args.status else None
    listed = sorted_tasks(snapshot.tasks, status=status)
    if not listed:
        print("No tasks found")
        return 0
    print("\n".join(format_task(task) for task in listed))
    return 0


def cmd_serve(args: argparse.Namespace, config: AppConfig) -> int:
    updates: dict[str, Any] = {}
    if args.host is not None:
        updates["web_host"] = args.host
    if args.port is not None:
        updates["web_port"] = args.port
    if updates:
        merged = config.model_dump()
        merged.update(updates)
        config = AppConfig.model_validate(merged)

    app = create_app(config)
    uvicorn.run(
        app,
        host=config.web_host,
        port=config.web_port,
        log_level="debug" if args.verbose else "info",
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="focus-tracker")
    parser.add_argument("--config", type=str, default=None, help="path to config.toml")
    parser.add_argument("--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="create config and data directory")
    init_parser.set_defaults(func=cmd_init, needs_config=False)

    insights_parser = subparsers.add_parser("insights", help="print insights for a snapshot file")
    insights_parser.add_argument("--data", type=str, default=None, help="snapshot JSON file")
    insights_parser.add_argument("--now", type=str, default=None, help="reference time, ISO-8601")
    insights_parser.add_argument("--format", choices=["text", "json"], default="text")
    insights_parser.set_defaults(func=cmd_insights, needs_config=True)

    stats_parser = subparsers.add_parser("stats", help="print dashboard statistics for a snapshot file")
    stats_parser.add_argument("--data", type=str, default=None, help="snapshot JSON file")
    stats_parser.add_argument("--now", type=str, default=None, help="reference time, ISO-8601")
    stats_parser.set_defaults(func=cmd_stats, needs_config=True)

    tasks_parser = subparsers.add_parser("tasks", help="list tasks by priority, then due date")
    tasks_parser.add_argument("--data", type=str, default=None, help="snapshot JSON file")
    tasks_parser.add_argument("--status", choices=[status.value for status in TaskStatus], default=None)
    tasks_parser.set_defaults(func=cmd_tasks, needs_config=True)

    serve_parser = subparsers.add_parser("serve", help="serve the local JSON API")
    serve_parser.add_argument("--host", type=str, default=None, help="bind host")
    serve_parser.add_argument("--port", type=int, default=None, help="bind port")
    serve_parser.set_defaults(func=cmd_serve, needs_config=True)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.needs_config:
        configure_logging(verbose=bool(args.verbose))
        return int(args.func(args))

    try:
        config = _load(args.config)
    except ValueError as exc:
        configure_logging(verbose=bool(args.verbose))
        logger.error("%s", exc)
        return 2
    configure_logging(verbose=bool(args.verbose), fmt=config.log_format)

    try:
        return int(args.func(args, config))
    except SnapshotError as exc:
        logger.error("%s", exc)
        return 2
    except ValueError as exc:
        logger.error("invalid argument: %s", exc)
        return 2
