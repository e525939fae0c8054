# finstat/entities/multi_period_report.py

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, Sequence, TypeVar, Union, overload

from finstat.domain.errors import EmptyPeriodsError, ReportEntityMismatchError
from finstat.domain.numeric import T, growth_rate
from finstat.entities.balance_sheet import BalanceSheet
from finstat.entities.cash_flow_statement import CashFlowStatement
from finstat.entities.entity import Entity
from finstat.entities.financial_period_summary import FinancialPeriodSummary, MarketData
from finstat.entities.income_statement import IncomeStatement
from finstat.entities.operational_metrics import OperationalMetrics
from finstat.entities.period import Period

logger = logging.getLogger(__name__)

_Item = TypeVar("_Item")


def _at(items: Optional[Sequence[_Item]], index: int) -> Optional[_Item]:
    if items is None or index >= len(items):
        return None
    return items[index]


class MultiPeriodReport(Generic[T]):
    """
    Chronologically ordered period summaries of one entity.

    Growth lists have one entry per consecutive pair of summaries (n-1).
    Growth is undefined when the prior value is zero or missing; that
    position holds None, the same rule TimeSeries.period_over_period_growth
    applies by leaving the period out.
    """

    def __init__(
        self,
        entity: Entity,
        period_summaries: Iterable[FinancialPeriodSummary[T]],
        annual_summary: Optional[FinancialPeriodSummary[T]] = None,
    ) -> None:
        summaries = list(period_summaries)
        if not summaries:
            raise EmptyPeriodsError()

        for summary in summaries:
            if summary.entity.id != entity.id:
                raise ReportEntityMismatchError(expected=entity.id, actual=summary.entity.id)
        if annual_summary is not None and annual_summary.entity.id != entity.id:
            raise ReportEntityMismatchError(expected=entity.id, actual=annual_summary.entity.id)

        self.entity = entity
        self.period_summaries: tuple[FinancialPeriodSummary[T], ...] = tuple(
            sorted(summaries, key=lambda s: s.period.start_date)
        )
        self.annual_summary = annual_summary

    @classmethod
    def create(
        cls,
        entity: Entity,
        periods: Sequence[Period],
        income_statements: Sequence[IncomeStatement[T]],
        balance_sheets: Sequence[BalanceSheet[T]],
        cash_flow_statements: Optional[Sequence[CashFlowStatement[T]]] = None,
        market_data: Optional[Sequence[MarketData[T]]] = None,
        operational_metrics: Optional[Sequence[OperationalMetrics[T]]] = None,
    ) -> MultiPeriodReport[T]:
        """
        Build one summary per period, pairing statements by index.

        periods, income_statements and balance_sheets must have the same
        length; the optional sequences may be shorter (missing entries are None).
        """
        if not (len(periods) == len(income_statements) == len(balance_sheets)):
            raise EmptyPeriodsError(
                "periods, income_statements and balance_sheets must have the same length "
                f"(got {len(periods)}, {len(income_statements)}, {len(balance_sheets)})"
            )

        summaries = [
            FinancialPeriodSummary.build(
                entity=entity,
                period=period,
                income_statement=income_statements[index],
                balance_sheet=balance_sheets[index],
                cash_flow_statement=_at(cash_flow_statements, index),
                market_data=_at(market_data, index),
                operational_metrics=_at(operational_metrics, index),
            )
            for index, period in enumerate(periods)
        ]
        report = cls(entity=entity, period_summaries=summaries)
        logger.info(
            "Multi-period report created",
            extra={"entity": entity.id, "periods": report.period_count},
        )
        return report

    # ---- access ----

    @property
    def period_count(self) -> int:
        return len(self.period_summaries)

    @property
    def periods(self) -> list[Period]:
        return [s.period for s in self.period_summaries]

    @overload
    def __getitem__(self, key: int) -> FinancialPeriodSummary[T]: ...

    @overload
    def __getitem__(self, key: Period) -> Optional[FinancialPeriodSummary[T]]: ...

    def __getitem__(self, key: Union[int, Period]) -> Optional[FinancialPeriodSummary[T]]:
        if isinstance(key, Period):
            for summary in self.period_summaries:
                if summary.period == key:
                    return summary
            return None
        return self.period_summaries[key]

    def __len__(self) -> int:
        return self.period_count

    def __iter__(self):
        return iter(self.period_summaries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiPeriodReport):
            return NotImplemented
        return (
            self.entity == other.entity
            and self.period_summaries == other.period_summaries
            and self.annual_summary == other.annual_summary
        )

    # ---- growth ----

    def _growth(self, metric: Callable[[FinancialPeriodSummary[T]], Optional[T]]) -> list[Optional[T]]:
        values = [metric(s) for s in self.period_summaries]
        return [growth_rate(prior, current) for prior, current in zip(values, values[1:])]

    def revenue_growth(self) -> list[Optional[T]]:
        return self._growth(lambda s: s.revenue)

    def ebitda_growth(self) -> list[Optional[T]]:
        return self._growth(lambda s: s.ebitda)

    def net_income_growth(self) -> list[Optional[T]]:
        return self._growth(lambda s: s.net_income)

    def eps_growth(self) -> list[Optional[T]]:
        """EPS from net income and MarketData shares; periods without market data give None."""
        return self._growth(lambda s: s.eps)

    # ---- trends ----

    def _trend(self, field: str) -> list[Optional[T]]:
        return [getattr(s, field) for s in self.period_summaries]

    def gross_margin_trend(self) -> list[Optional[T]]:
        return self._trend("gross_margin")

    def operating_margin_trend(self) -> list[Optional[T]]:
        return self._trend("operating_margin")

    def net_margin_trend(self) -> list[Optional[T]]:
        return self._trend("net_margin")

    def roe_trend(self) -> list[Optional[T]]:
        return self._trend("roe")

    def roa_trend(self) -> list[Optional[T]]:
        return self._trend("roa")

    def debt_to_equity_trend(self) -> list[Optional[T]]:
        return self._trend("debt_to_equity")

    def current_ratio_trend(self) -> list[Optional[T]]:
        return self._trend("current_ratio")

    def debt_to_ebitda_trend(self) -> list[Optional[T]]:
        return self._trend("debt_to_ebitda")

    def pe_ratio_trend(self) -> list[Optional[T]]:
        return self._trend("pe_ratio")

    def pb_ratio_trend(self) -> list[Optional[T]]:
        return self._trend("pb_ratio")

    def ps_ratio_trend(self) -> list[Optional[T]]:
        return self._trend("ps_ratio")

    def ev_to_ebitda_trend(self) -> list[Optional[T]]:
        return self._trend("ev_to_ebitda")

    def period_over_period_change(
        self,
        metric: Callable[[FinancialPeriodSummary[T]], Optional[T]],
    ) -> list[Optional[T]]:
        """current - prior for each consecutive pair; None when either side is missing."""
        values = [metric(s) for s in self.period_summaries]
        return [
            None if prior is None or current is None else current - prior
            for prior, current in zip(values, values[1:])
        ]

    # ---- keyed encoding ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity.to_dict(),
            "period_summaries": [s.to_dict() for s in self.period_summaries],
            "annual_summary": self.annual_summary.to_dict() if self.annual_summary else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: Optional[type] = None) -> MultiPeriodReport:
        annual = data.get("annual_summary")
        return cls(
            entity=Entity.from_dict(data["entity"]),
            period_summaries=[
                FinancialPeriodSummary.from_dict(s, numeric_type) for s in data["period_summaries"]
            ],
            annual_summary=FinancialPeriodSummary.from_dict(annual, numeric_type) if annual else None,
        )
