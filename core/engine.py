from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from core.models import Insight
from core.rules import RULES, Rule, RuleContext
from core.windows import Clock, DateWindows, FixedClock, SystemClock
from shared.schemas import FocusSession, Task

logger = logging.getLogger(__name__)


class InsightEngine:
    """Runs the rule battery over one snapshot and concatenates the results in rule order."""

    def __init__(self, clock: Clock | None = None, rules: Sequence[Rule] = RULES) -> None:
        self.clock = clock or SystemClock()
        self.rules = tuple(rules)

    def analyze(self, tasks: Iterable[Task], focus_sessions: Iterable[FocusSession]) -> list[Insight]:
        now = self.clock.now()
        context = RuleContext(
            tasks=tuple(tasks),
            focus_sessions=tuple(focus_sessions),
            windows=DateWindows.from_clock(FixedClock(now)),
            now=now,
        )
        insights: list[Insight] = []
        for rule in self.rules:
            emitted = rule(context)
            logger.debug("rule %s emitted %d insight(s)", rule.__name__, len(emitted))
            insights.extend(emitted)
        logger.debug(
            "analyzed %d task(s) and %d focus session(s) for %s: %d insight(s)",
            len(context.tasks),
            len(context.focus_sessions),
            context.today.isoformat(),
            len(insights),
        )
        return insights


def analyze(
    tasks: Iterable[Task],
    focus_sessions: Iterable[FocusSession],
    clock: Clock | None = None,
) -> list[Insight]:
    return InsightEngine(clock=clock).analyze(tasks, focus_sessions)
