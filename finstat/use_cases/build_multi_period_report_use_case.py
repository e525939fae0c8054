# finstat/use_cases/build_multi_period_report_use_case.py

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence, TypeVar, Union

from finstat.domain.services.account_aggregator import AggregationPolicy
from finstat.entities.balance_sheet import BalanceSheet
from finstat.entities.cash_flow_statement import CashFlowStatement
from finstat.entities.entity import Entity
from finstat.entities.financial_period_summary import MarketData
from finstat.entities.income_statement import IncomeStatement
from finstat.entities.multi_period_report import MultiPeriodReport
from finstat.entities.operational_metrics import OperationalMetrics
from finstat.entities.period import Period
from finstat.utils.config_loader import AnalysisConfig, load_analysis_config
from finstat.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

_Statement = TypeVar("_Statement", BalanceSheet, IncomeStatement, CashFlowStatement)


@dataclass(frozen=True)
class BuildMultiPeriodReportResult:
    report: MultiPeriodReport
    validated_balance_sheets: int
    tolerance: Any
    aggregation_policy: AggregationPolicy
    numeric_type: type


class BuildMultiPeriodReportUseCase:
    """
    Validate a set of per-period statements and compose them into a report.

    Steps:
    - statements without an explicit aggregation policy get the configured one
    - statements without accounts (no inferred numeric type) take the type of
      the other statements, or the configured numeric_type when none has accounts
    - every balance sheet is validated with the configured tolerance
      (AccountingEquationViolation propagates, no report is built)
    - MultiPeriodReport.create pairs the statements by period index
    """

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config if config is not None else load_analysis_config()

    @classmethod
    def from_config_file(cls, path: Optional[Union[str, Path]] = None) -> BuildMultiPeriodReportUseCase:
        """Application entry point: load the config and set up logging at its level."""
        config = load_analysis_config(path)
        setup_logging(config.log_level)
        return cls(config=config)

    def _with_defaults(self, statement: _Statement, numeric_type: type) -> _Statement:
        changes: dict[str, Any] = {}
        if statement.aggregation_policy is None:
            changes["aggregation_policy"] = self.config.aggregation_policy
        if statement.numeric_type is None:
            changes["numeric_type"] = numeric_type
        return dataclasses.replace(statement, **changes) if changes else statement

    def execute(
        self,
        entity: Entity,
        periods: Sequence[Period],
        income_statements: Sequence[IncomeStatement],
        balance_sheets: Sequence[BalanceSheet],
        *,
        cash_flow_statements: Optional[Sequence[CashFlowStatement]] = None,
        market_data: Optional[Sequence[MarketData]] = None,
        operational_metrics: Optional[Sequence[OperationalMetrics]] = None,
        tolerance: Optional[Any] = None,
    ) -> BuildMultiPeriodReportResult:
        statements = [*income_statements, *balance_sheets, *(cash_flow_statements or [])]
        numeric_type = next(
            (s.numeric_type for s in statements if s.numeric_type is not None),
            self.config.numeric_type,
        )
        income_statements = [self._with_defaults(s, numeric_type) for s in income_statements]
        balance_sheets = [self._with_defaults(s, numeric_type) for s in balance_sheets]
        if cash_flow_statements is not None:
            cash_flow_statements = [self._with_defaults(s, numeric_type) for s in cash_flow_statements]

        logger.info(
            "Building multi-period report",
            extra={
                "entity": entity.id,
                "periods": len(periods),
                "aggregation_policy": self.config.aggregation_policy.value,
                "numeric_type": numeric_type.__name__,
            },
        )

        applied_tolerance = None
        for balance_sheet in balance_sheets:
            applied_tolerance = (
                tolerance
                if tolerance is not None
                else self.config.tolerance_as(balance_sheet.value_type)
            )
            balance_sheet.validate(applied_tolerance)

        logger.info(
            "Balance sheets validated",
            extra={"entity": entity.id, "count": len(balance_sheets), "tolerance": applied_tolerance},
        )

        report = MultiPeriodReport.create(
            entity=entity,
            periods=periods,
            income_statements=income_statements,
            balance_sheets=balance_sheets,
            cash_flow_statements=cash_flow_statements,
            market_data=market_data,
            operational_metrics=operational_metrics,
        )

        return BuildMultiPeriodReportResult(
            report=report,
            validated_balance_sheets=len(balance_sheets),
            tolerance=applied_tolerance,
            aggregation_policy=self.config.aggregation_policy,
            numeric_type=numeric_type,
        )
