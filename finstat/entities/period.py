# finstat/entities/period.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from functools import total_ordering
from typing import Any

from finstat.domain.time.fiscal_calendar import (
    add_months,
    month_end,
    quarter_end,
    quarter_of,
    quarter_start,
    require_plain_date,
)


class PeriodType(Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"
    CUSTOM = "custom"

    @property
    def granularity(self) -> int:
        return _GRANULARITY[self]


# shorter periods sort first when two periods start on the same day
_GRANULARITY = {
    PeriodType.DAILY: 0,
    PeriodType.MONTHLY: 1,
    PeriodType.QUARTERLY: 2,
    PeriodType.ANNUAL: 3,
    PeriodType.CUSTOM: 4,
}


@total_ordering
@dataclass(frozen=True)
class Period:
    """
    Immutable reporting interval (day, month, quarter, year or custom range).

    Invariants:
    - start_date/end_date are dates (no time)
    - end_date >= start_date
    - equality is interval identity: same type, same bounds

    Ordering is chronological by start_date; use the factories rather
    than the constructor so bounds are always consistent with the type.
    """

    period_type: PeriodType
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if not isinstance(self.period_type, PeriodType):
            raise TypeError("period_type must be a PeriodType")
        require_plain_date(self.start_date, "start_date")
        require_plain_date(self.end_date, "end_date")
        if self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")

    # ---- factories ----

    @classmethod
    def day(cls, d: date) -> Period:
        require_plain_date(d, "d")
        return cls(PeriodType.DAILY, d, d)

    @classmethod
    def month(cls, year: int, month: int) -> Period:
        if not 1 <= month <= 12:
            raise ValueError("month must be between 1 and 12")
        return cls(PeriodType.MONTHLY, date(year, month, 1), month_end(year, month))

    @classmethod
    def quarter(cls, year: int, quarter: int) -> Period:
        if not 1 <= quarter <= 4:
            raise ValueError("quarter must be between 1 and 4")
        return cls(
            PeriodType.QUARTERLY,
            quarter_start(year, quarter),
            quarter_end(year, quarter),
        )

    @classmethod
    def year(cls, year: int) -> Period:
        return cls(PeriodType.ANNUAL, date(year, 1, 1), date(year, 12, 31))

    @classmethod
    def custom(cls, start: date, end: date) -> Period:
        return cls(PeriodType.CUSTOM, start, end)

    # ---- ordering ----

    @property
    def sort_key(self) -> tuple[date, int, date]:
        return (self.start_date, self.period_type.granularity, self.end_date)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self.sort_key < other.sort_key

    # ---- derived ----

    @property
    def label(self) -> str:
        start = self.start_date
        if self.period_type is PeriodType.DAILY:
            return start.isoformat()
        if self.period_type is PeriodType.MONTHLY:
            return f"{start.year:04d}-{start.month:02d}"
        if self.period_type is PeriodType.QUARTERLY:
            return f"{start.year:04d}-Q{quarter_of(start)}"
        if self.period_type is PeriodType.ANNUAL:
            return f"{start.year:04d}"
        return f"{start.isoformat()}..{self.end_date.isoformat()}"

    def next(self) -> Period:
        start = self.start_date
        if self.period_type is PeriodType.DAILY:
            return Period.day(start + timedelta(days=1))
        if self.period_type is PeriodType.MONTHLY:
            return Period.month(*add_months(start.year, start.month, 1))
        if self.period_type is PeriodType.QUARTERLY:
            year, month = add_months(start.year, start.month, 3)
            return Period.quarter(year, quarter_of(date(year, month, 1)))
        if self.period_type is PeriodType.ANNUAL:
            return Period.year(start.year + 1)
        raise ValueError("custom periods have no successor")

    def months(self) -> list[Period]:
        if self.period_type is PeriodType.MONTHLY:
            return [self]
        if self.period_type is PeriodType.QUARTERLY:
            start = self.start_date
            return [Period.month(start.year, start.month + offset) for offset in range(3)]
        if self.period_type is PeriodType.ANNUAL:
            return [Period.month(self.start_date.year, m) for m in range(1, 13)]
        return []

    def quarters(self) -> list[Period]:
        if self.period_type is PeriodType.QUARTERLY:
            return [self]
        if self.period_type is PeriodType.ANNUAL:
            return [Period.quarter(self.start_date.year, q) for q in range(1, 5)]
        return []

    def __str__(self) -> str:
        return self.label

    # ---- keyed encoding ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.period_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Period:
        return cls(
            PeriodType(data["type"]),
            date.fromisoformat(data["start_date"]),
            date.fromisoformat(data["end_date"]),
        )
