from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from shared.schemas import Snapshot

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot file cannot be read or does not hold valid records."""


def parse_snapshot(raw: str | bytes, source: str = "<memory>") -> Snapshot:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise SnapshotError(f"{source} must hold a JSON object with tasks and focusSessions")
    try:
        snapshot = Snapshot.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotError(f"{source} holds invalid records: {exc}") from exc
    logger.debug(
        "loaded snapshot",
        extra={"source": source, "tasks": len(snapshot.tasks), "focus_sessions": len(snapshot.focus_sessions)},
    )
    return snapshot


def load_snapshot(path: Path) -> Snapshot:
    resolved = path.expanduser()
    if not resolved.exists():
        raise SnapshotError(f"snapshot file not found: {resolved}")
    return parse_snapshot(resolved.read_bytes(), source=str(resolved))
