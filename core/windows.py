from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator, Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class FixedClock:
    instant: datetime

    def now(self) -> datetime:
        return self.instant


@dataclass(frozen=True, slots=True)
class DateWindow:
    """Trailing calendar days ending at today, oldest first."""

    days: tuple[date, ...]
    _members: frozenset[date] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_members", frozenset(self.days))

    def __contains__(self, day: object) -> bool:
        return day in self._members

    def __iter__(self) -> Iterator[date]:
        return iter(self.days)

    def __len__(self) -> int:
        return len(self.days)

    def head(self, count: int) -> DateWindow:
        return DateWindow(self.days[:count])

    def tail(self, count: int) -> DateWindow:
        return DateWindow(self.days[-count:])


def trailing_days(today: date, count: int) -> DateWindow:
    return DateWindow(tuple(today - timedelta(days=offset) for offset in range(count - 1, -1, -1)))


def last_7_days(today: date) -> DateWindow:
    return trailing_days(today, 7)


def last_14_days(today: date) -> DateWindow:
    return trailing_days(today, 14)


def last_30_days(today: date) -> DateWindow:
    return trailing_days(today, 30)


@dataclass(frozen=True, slots=True)
class DateWindows:
    today: date
    last_7: DateWindow
    last_14: DateWindow
    last_30: DateWindow

    @classmethod
    def for_day(cls, today: date) -> DateWindows:
        return cls(
            today=today,
            last_7=last_7_days(today),
            last_14=last_14_days(today),
            last_30=last_30_days(today),
        )

    @classmethod
    def from_clock(cls, clock: Clock) -> DateWindows:
        # recorded dates are UTC date portions, so today is too
        now = clock.now()
        return cls.for_day(now.astimezone(UTC).date() if now.tzinfo else now.date())


def days_between(first: date, second: date) -> int:
    # date-only values differ by whole days, so rounding up is exact
    return abs((second - first).days)


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 instant, accepting a trailing `Z` for UTC."""
    return datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))


def local_time(value: datetime, reference: datetime) -> datetime:
    # naive timestamps carry no zone to convert from
    if value.tzinfo is None or reference.tzinfo is None:
        return value
    return value.astimezone(reference.tzinfo)


def date_of(value: datetime | None) -> date | None:
    if value is None:
        return None
    return value.date()


def format_fixed(value: float, places: int = 0) -> str:
    """Fixed-point text with halves rounded away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def percent_of(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int(Decimal(part * 100) / Decimal(whole) + Decimal("0.5"))
