from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Query

from core.engine import analyze
from core.models import DashboardStats, Insight
from core.stats import build_dashboard
from core.windows import Clock, FixedClock, SystemClock
from shared.schemas import Snapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _clock(now: datetime | None) -> Clock:
    if now is None:
        return SystemClock()
    return FixedClock(now)


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/insights", response_model=list[Insight])
def insights(
    snapshot: Snapshot,
    now: datetime | None = Query(default=None, description="pin the reference time (ISO-8601)"),
) -> list[Insight]:
    result = analyze(snapshot.tasks, snapshot.focus_sessions, clock=_clock(now))
    logger.info("insights generated", extra={"tasks": len(snapshot.tasks), "insights": len(result)})
    return result


@router.post("/stats", response_model=DashboardStats)
def stats(
    snapshot: Snapshot,
    now: datetime | None = Query(default=None, description="pin the reference time (ISO-8601)"),
) -> DashboardStats:
    return build_dashboard(snapshot.tasks, snapshot.focus_sessions, clock=_clock(now))
