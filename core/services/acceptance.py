"""Acceptance time window for asset creation timestamps.

Two rules are supported: a fixed calendar cutoff, or a rolling window of N
calendar months before "now". Naive datetimes are treated as UTC.
"""

from __future__ import annotations

import calendar
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Return `dt` as an aware UTC datetime (naive values are assumed UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def subtract_months(dt: datetime, months: int) -> datetime:
    """Return `dt` moved back by calendar `months`, clamping the day of month."""
    total = dt.year * 12 + (dt.month - 1) - months
    year, month0 = divmod(total, 12)
    month = month0 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class AcceptanceWindow:
    """Timestamp predicate: accepted when on/after the cutoff.

    Attributes:
        since: Fixed cutoff. When set, `months` is ignored.
        months: Length of the rolling window in calendar months.
        clock: Source of "now" for the rolling rule.
    """

    since: datetime | None = None
    months: int = 6
    clock: Callable[[], datetime] = _utc_now

    @classmethod
    def rolling(
        cls, months: int = 6, clock: Callable[[], datetime] | None = None
    ) -> AcceptanceWindow:
        if months < 0:
            raise ValueError(f"months must be >= 0, got {months}")
        return cls(since=None, months=months, clock=clock or _utc_now)

    @classmethod
    def fixed(cls, since: datetime | date) -> AcceptanceWindow:
        if not isinstance(since, datetime):
            since = datetime(since.year, since.month, since.day)
        return cls(since=as_utc(since))

    @property
    def is_fixed(self) -> bool:
        return self.since is not None

    def cutoff(self) -> datetime:
        """Return the earliest accepted creation timestamp."""
        if self.since is not None:
            return as_utc(self.since)
        return subtract_months(as_utc(self.clock()), self.months)

    def accepts(self, created: datetime | None, cutoff: datetime | None = None) -> bool:
        """Return True when `created` is on/after the cutoff; None never passes."""
        if created is None:
            return False
        return as_utc(created) >= (cutoff if cutoff is not None else self.cutoff())

    def describe(self) -> str:
        if self.since is not None:
            return f"since {self.since.date().isoformat()}"
        return f"last {self.months} months"
