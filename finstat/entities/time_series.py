# finstat/entities/time_series.py

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Iterator, Mapping, Optional, Sequence

from finstat.domain.errors import TimeSeriesLengthMismatchError
from finstat.domain.numeric import T, coerce, encode_number, growth_rate
from finstat.entities.period import Period, PeriodType


@dataclass(frozen=True)
class TimeSeriesMetadata:
    """Descriptive only; never used in computation."""

    name: str = ""
    description: Optional[str] = None
    unit: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "unit": self.unit}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TimeSeriesMetadata:
        return cls(
            name=data.get("name", ""),
            description=data.get("description"),
            unit=data.get("unit"),
        )


class AggregationMethod(Enum):
    SUM = "sum"
    AVERAGE = "average"
    FIRST = "first"
    LAST = "last"
    MIN = "min"
    MAX = "max"


class TimeSeries(Generic[T]):
    """
    Sparse, period-keyed numeric series.

    A partial function Period -> T. `periods` is duplicate-free and sorted
    chronologically; every period in it has a value. Instances are never
    mutated: every operation returns a new series.

    Binary arithmetic between two series is defined over the intersection
    of their periods only. A period whose divisor is zero is left out of a
    division result instead of producing inf/NaN or raising.
    """

    __slots__ = ("_values", "_periods", "_metadata", "_labels")

    def __init__(
        self,
        periods: Sequence[Period],
        values: Sequence[T],
        metadata: Optional[TimeSeriesMetadata] = None,
        labels: Optional[Sequence[str]] = None,
    ) -> None:
        periods = list(periods)
        values = list(values)
        if len(periods) != len(values):
            raise TimeSeriesLengthMismatchError(len(periods), len(values))
        if labels is not None and len(labels) != len(periods):
            raise ValueError("labels must have the same length as periods")

        data: dict[Period, T] = {}
        label_map: Optional[dict[Period, str]] = {} if labels is not None else None
        for index, (period, value) in enumerate(zip(periods, values)):
            # duplicates overwrite: last value wins
            data[period] = value
            if label_map is not None:
                label_map[period] = labels[index]

        self._assign(data, metadata, label_map)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[Period, T],
        metadata: Optional[TimeSeriesMetadata] = None,
        labels: Optional[Mapping[Period, str]] = None,
    ) -> TimeSeries[T]:
        series = cls.__new__(cls)
        series._assign(dict(data), metadata, dict(labels) if labels is not None else None)
        return series

    @classmethod
    def zeros(
        cls,
        periods: Iterable[Period],
        numeric_type: type = float,
        metadata: Optional[TimeSeriesMetadata] = None,
    ) -> TimeSeries[T]:
        zero = numeric_type(0)
        return cls.from_mapping({p: zero for p in periods}, metadata)

    def _assign(
        self,
        data: dict[Period, T],
        metadata: Optional[TimeSeriesMetadata],
        labels: Optional[dict[Period, str]],
    ) -> None:
        for period in data:
            if not isinstance(period, Period):
                raise TypeError("TimeSeries keys must be Period instances")
        self._values = data
        self._periods = tuple(sorted(data, key=lambda p: p.sort_key))
        self._metadata = metadata if metadata is not None else TimeSeriesMetadata()
        self._labels = labels

    # ---- access ----

    @property
    def periods(self) -> tuple[Period, ...]:
        return self._periods

    @property
    def metadata(self) -> TimeSeriesMetadata:
        return self._metadata

    def __getitem__(self, period: Period) -> Optional[T]:
        """Value at `period`, or None when the period was never set."""
        return self._values.get(period)

    def get(self, period: Period, default: Optional[T] = None) -> Optional[T]:
        return self._values.get(period, default)

    def label(self, period: Period) -> Optional[str]:
        if self._labels is None:
            return None
        return self._labels.get(period)

    def __contains__(self, period: object) -> bool:
        return period in self._values

    def __len__(self) -> int:
        return len(self._periods)

    def __iter__(self) -> Iterator[T]:
        """Values in period order; use `periods` or `items()` for the keys."""
        return (self._values[p] for p in self._periods)

    def items(self) -> list[tuple[Period, T]]:
        return [(p, self._values[p]) for p in self._periods]

    def to_mapping(self) -> dict[Period, T]:
        return dict(self._values)

    @property
    def values_list(self) -> list[T]:
        return [self._values[p] for p in self._periods]

    @property
    def first(self) -> Optional[T]:
        return self._values[self._periods[0]] if self._periods else None

    @property
    def last(self) -> Optional[T]:
        return self._values[self._periods[-1]] if self._periods else None

    @property
    def is_empty(self) -> bool:
        return not self._periods

    @property
    def numeric_type(self) -> Optional[type]:
        return type(self.first) if self._periods else None

    def with_metadata(self, metadata: TimeSeriesMetadata) -> TimeSeries[T]:
        return TimeSeries.from_mapping(self._values, metadata, self._labels)

    # ---- transformation ----

    def map_values(self, transform: Callable[[T], T]) -> TimeSeries[T]:
        return TimeSeries.from_mapping(
            {p: transform(v) for p, v in self._values.items()}, self._metadata
        )

    def filter_values(self, predicate: Callable[[T], bool]) -> TimeSeries[T]:
        return TimeSeries.from_mapping(
            {p: v for p, v in self._values.items() if predicate(v)}, self._metadata
        )

    def zip_with(self, other: TimeSeries[T], operation: Callable[[T, T], T]) -> TimeSeries[T]:
        """Combine two series period by period over the intersection of their periods."""
        data = {
            p: operation(v, other._values[p])
            for p, v in self._values.items()
            if p in other._values
        }
        return TimeSeries.from_mapping(data, self._metadata)

    def union_add(self, other: TimeSeries[T], numeric_type: Optional[type] = None) -> TimeSeries[T]:
        """Sum over the union of periods, a period missing on one side counting as zero."""
        numeric_type = numeric_type or self.numeric_type or other.numeric_type or float
        zero = numeric_type(0)
        periods = set(self._values) | set(other._values)
        data = {p: self._values.get(p, zero) + other._values.get(p, zero) for p in periods}
        return TimeSeries.from_mapping(data, self._metadata)

    def range(self, start: Period, end: Period) -> TimeSeries[T]:
        data = {p: v for p, v in self._values.items() if start <= p <= end}
        return TimeSeries.from_mapping(data, self._metadata)

    def fill_missing(self, value: T, over: Iterable[Period]) -> TimeSeries[T]:
        data = {p: self._values.get(p, value) for p in over}
        return TimeSeries.from_mapping(data, self._metadata)

    def fill_forward(self, over: Iterable[Period]) -> TimeSeries[T]:
        data: dict[Period, T] = {}
        last_known: Optional[T] = None
        for period in sorted(over, key=lambda p: p.sort_key):
            if period in self._values:
                last_known = self._values[period]
            if last_known is not None:
                data[period] = last_known
        return TimeSeries.from_mapping(data, self._metadata)

    def aggregate(self, to: PeriodType, method: AggregationMethod = AggregationMethod.SUM) -> TimeSeries[T]:
        """Roll the series up to quarterly or annual buckets."""
        if to not in (PeriodType.QUARTERLY, PeriodType.ANNUAL):
            raise ValueError("aggregate target must be QUARTERLY or ANNUAL")

        groups: dict[Period, list[T]] = {}
        for period in self._periods:
            start = period.start_date
            if to is PeriodType.QUARTERLY:
                target = Period.quarter(start.year, (start.month - 1) // 3 + 1)
            else:
                target = Period.year(start.year)
            groups.setdefault(target, []).append(self._values[period])

        data = {target: _reduce(values, method) for target, values in groups.items()}
        return TimeSeries.from_mapping(data, self._metadata)

    # ---- growth ----

    def period_over_period_growth(self) -> TimeSeries[T]:
        """
        Growth from each period to the next one in `periods`.

        The first period has no prior and is dropped. A period whose prior
        value is zero is omitted rather than reported as 0 or inf.
        """
        data: dict[Period, T] = {}
        for prior, current in zip(self._periods, self._periods[1:]):
            rate = growth_rate(self._values[prior], self._values[current])
            if rate is not None:
                data[current] = rate
        name = f"{self._metadata.name} growth" if self._metadata.name else "growth"
        return TimeSeries.from_mapping(data, TimeSeriesMetadata(name=name, unit="ratio"))

    # ---- arithmetic ----

    def _binary(self, other: Any, op: Callable[[T, T], T]) -> TimeSeries[T]:
        if isinstance(other, TimeSeries):
            return self.zip_with(other, op)
        return self.map_values(lambda v: op(v, other))

    def __add__(self, other: Any) -> TimeSeries[T]:
        return self._binary(other, operator.add)

    def __sub__(self, other: Any) -> TimeSeries[T]:
        return self._binary(other, operator.sub)

    def __mul__(self, other: Any) -> TimeSeries[T]:
        return self._binary(other, operator.mul)

    def __truediv__(self, other: Any) -> TimeSeries[T]:
        if isinstance(other, TimeSeries):
            data = {
                p: v / other._values[p]
                for p, v in self._values.items()
                if p in other._values and other._values[p] != 0
            }
            return TimeSeries.from_mapping(data, self._metadata)
        if other == 0:
            return TimeSeries.from_mapping({}, self._metadata)
        return self.map_values(lambda v: v / other)

    def __neg__(self) -> TimeSeries[T]:
        return self.map_values(operator.neg)

    # ---- equality ----

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeSeries):
            return NotImplemented
        return self._values == other._values and self._metadata == other._metadata

    def __hash__(self) -> int:
        return hash((tuple(self.items()), self._metadata))

    def __repr__(self) -> str:
        body = ", ".join(f"{p.label}: {v}" for p, v in self.items())
        name = self._metadata.name or "TimeSeries"
        return f"<{name} {{{body}}}>"

    # ---- keyed encoding ----

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "periods": [p.to_dict() for p in self._periods],
            "values": [encode_number(self._values[p]) for p in self._periods],
            "metadata": self._metadata.to_dict(),
        }
        if self._labels is not None:
            data["labels"] = [self._labels.get(p) for p in self._periods]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: type = float) -> TimeSeries:
        return cls(
            periods=[Period.from_dict(p) for p in data["periods"]],
            values=[coerce(v, numeric_type) for v in data["values"]],
            metadata=TimeSeriesMetadata.from_dict(data.get("metadata") or {}),
            labels=data.get("labels"),
        )


def _reduce(values: list[T], method: AggregationMethod) -> T:
    if method is AggregationMethod.SUM:
        return sum(values[1:], values[0])
    if method is AggregationMethod.AVERAGE:
        return sum(values[1:], values[0]) / len(values)
    if method is AggregationMethod.FIRST:
        return values[0]
    if method is AggregationMethod.LAST:
        return values[-1]
    if method is AggregationMethod.MIN:
        return min(values)
    return max(values)


def average_time_series(series: TimeSeries[T]) -> TimeSeries[T]:
    """
    Two-point moving average used for averaged balance-sheet denominators.

    The first period keeps its own value (no prior balance); each later
    period is (previous + current) / 2. Not applied implicitly anywhere:
    ratio functions that want an averaged denominator call it explicitly.
    """
    data: dict[Period, T] = {}
    prior: Optional[T] = None
    for period, value in series.items():
        data[period] = value if prior is None else (prior + value) / 2
        prior = value
    return TimeSeries.from_mapping(data, series.metadata)
