"""Pure insight computation engine."""

from core.engine import InsightEngine, analyze
from core.models import DashboardStats, Insight
from core.stats import build_dashboard
from core.windows import Clock, DateWindows, FixedClock, SystemClock

__all__ = [
    "analyze",
    "build_dashboard",
    "InsightEngine",
    "Insight",
    "DashboardStats",
    "Clock",
    "FixedClock",
    "SystemClock",
    "DateWindows",
]
