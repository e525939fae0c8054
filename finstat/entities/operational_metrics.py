# finstat/entities/operational_metrics.py

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, Iterable, Mapping, Optional

from finstat.domain.errors import OperationalMetricsError
from finstat.domain.numeric import T, coerce, encode_number, safe_divide
from finstat.entities.entity import Entity
from finstat.entities.period import Period
from finstat.entities.time_series import TimeSeries, TimeSeriesMetadata


@dataclass(frozen=True)
class OperationalMetricsMetadata:
    industry: Optional[str] = None
    business_model: Optional[str] = None
    metric_definitions: Optional[Mapping[str, str]] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "industry": self.industry,
            "business_model": self.business_model,
            "metric_definitions": dict(self.metric_definitions) if self.metric_definitions else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OperationalMetricsMetadata:
        return cls(
            industry=data.get("industry"),
            business_model=data.get("business_model"),
            metric_definitions=data.get("metric_definitions"),
        )


@dataclass(frozen=True)
class OperationalMetrics(Generic[T]):
    """
    Industry-specific, non-GAAP KPIs of one entity for one period.

    Metric names are free-form ("units_sold", "churn_rate", ...); a metric
    that was not reported is absent, never zero.
    """

    entity: Entity
    period: Period
    metrics: Mapping[str, T] = field(default_factory=dict)
    metadata: Optional[OperationalMetricsMetadata] = None

    def __post_init__(self) -> None:
        if not isinstance(self.entity, Entity):
            raise TypeError("entity must be an Entity")
        if not isinstance(self.period, Period):
            raise TypeError("period must be a Period")
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    def __hash__(self) -> int:
        # metadata may hold a dict of definitions; equal metrics still hash equal without it
        return hash((self.entity, self.period, frozenset(self.metrics.items())))

    def __getitem__(self, name: str) -> Optional[T]:
        return self.metrics.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.metrics

    def derived(self, numerator: str, denominator: str) -> Optional[T]:
        """numerator / denominator, None when either is missing or the denominator is zero."""
        return safe_divide(self.metrics.get(numerator), self.metrics.get(denominator))

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity.to_dict(),
            "period": self.period.to_dict(),
            "metrics": {k: encode_number(v) for k, v in self.metrics.items()},
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: type = float) -> OperationalMetrics:
        metadata = data.get("metadata")
        return cls(
            entity=Entity.from_dict(data["entity"]),
            period=Period.from_dict(data["period"]),
            metrics={k: coerce(v, numeric_type) for k, v in data["metrics"].items()},
            metadata=OperationalMetricsMetadata.from_dict(metadata) if metadata else None,
        )


class OperationalMetricsTimeSeries(Generic[T]):
    """
    OperationalMetrics of one entity across periods, sorted chronologically.

    Each period's metric dictionary may be sparse; a metric only becomes a
    TimeSeries over the periods that report it.
    """

    def __init__(self, metrics: Iterable[OperationalMetrics[T]]) -> None:
        metrics = list(metrics)
        if not metrics:
            raise OperationalMetricsError("At least one OperationalMetrics is required")

        entity = metrics[0].entity
        for item in metrics:
            if item.entity != entity:
                raise OperationalMetricsError(
                    f"All operational metrics must belong to entity '{entity.id}' "
                    f"(found '{item.entity.id}')"
                )

        self.entity = entity
        self.metrics: tuple[OperationalMetrics[T], ...] = tuple(
            sorted(metrics, key=lambda m: m.period.sort_key)
        )
        self._by_period = {m.period: m for m in self.metrics}

    @property
    def periods(self) -> list[Period]:
        return [m.period for m in self.metrics]

    def __getitem__(self, period: Period) -> Optional[OperationalMetrics[T]]:
        return self._by_period.get(period)

    def __len__(self) -> int:
        return len(self.metrics)

    def time_series(self, name: str) -> Optional[TimeSeries[T]]:
        """The metric as a series over the periods reporting it, or None if none does."""
        data = {m.period: m.metrics[name] for m in self.metrics if name in m.metrics}
        if not data:
            return None
        return TimeSeries.from_mapping(data, TimeSeriesMetadata(name=name))

    def growth_rate(self, name: str) -> Optional[TimeSeries[T]]:
        series = self.time_series(name)
        if series is None:
            return None
        return series.period_over_period_growth()

    def derived(self, numerator: str, denominator: str) -> TimeSeries[T]:
        data = {}
        for m in self.metrics:
            value = m.derived(numerator, denominator)
            if value is not None:
                data[m.period] = value
        return TimeSeries.from_mapping(data, TimeSeriesMetadata(name=f"{numerator}/{denominator}"))
