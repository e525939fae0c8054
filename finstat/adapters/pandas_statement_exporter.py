# finstat/adapters/pandas_statement_exporter.py

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np
import pandas as pd

from finstat.entities.balance_sheet import BalanceSheet
from finstat.entities.cash_flow_statement import CashFlowStatement
from finstat.entities.income_statement import IncomeStatement
from finstat.entities.multi_period_report import MultiPeriodReport
from finstat.entities.time_series import TimeSeries
from finstat.infrastructure.schemas.statement_schema import (
    REPORT_FRAME_COLUMNS,
    REPORT_FRAME_DTYPES,
    REPORT_FRAME_INDEX,
)

logger = logging.getLogger(__name__)

Statement = Union[BalanceSheet, IncomeStatement, CashFlowStatement]

_STATEMENT_ROWS = {
    BalanceSheet: [
        "total_assets",
        "current_assets",
        "non_current_assets",
        "total_liabilities",
        "current_liabilities",
        "non_current_liabilities",
        "total_equity",
        "working_capital",
        "cash_and_equivalents",
        "interest_bearing_debt",
        "net_debt",
        "current_ratio",
        "quick_ratio",
        "cash_ratio",
        "debt_to_equity",
        "equity_ratio",
        "debt_ratio",
    ],
    IncomeStatement: [
        "total_revenue",
        "cost_of_revenue",
        "gross_profit",
        "operating_expenses",
        "operating_income",
        "depreciation_amortization",
        "ebitda",
        "interest_expense",
        "total_expenses",
        "net_income",
        "gross_margin",
        "operating_margin",
        "net_margin",
        "ebitda_margin",
    ],
    CashFlowStatement: [
        "operating_cash_flow",
        "investing_cash_flow",
        "financing_cash_flow",
        "net_cash_flow",
        "free_cash_flow",
        "capital_expenditures",
    ],
}


def _to_float(value) -> float:
    return np.nan if value is None else float(value)


class PandasStatementExporter:
    """
    Read-only pandas projections of finstat values.

    - Index: period labels ("2024-Q1", ...), chronological
    - Missing values: NaN (a period absent from a series, or an undefined ratio)
    - Values are converted to float64; keep the finstat objects for exact Decimal work
    """

    def time_series_to_series(self, series: TimeSeries, name: Optional[str] = None) -> pd.Series:
        return pd.Series(
            [_to_float(v) for v in series.values_list],
            index=pd.Index([p.label for p in series.periods], name=REPORT_FRAME_INDEX),
            name=name or series.metadata.name or None,
            dtype="float64",
        )

    def statement_to_frame(self, statement: Statement) -> pd.DataFrame:
        """One row per declared period, one column per derived total or ratio."""
        rows = _STATEMENT_ROWS.get(type(statement))
        if rows is None:
            raise TypeError(f"Unsupported statement type: {type(statement).__name__}")

        labels = [p.label for p in statement.periods]
        snapshot = statement.materialize()
        columns = {}
        for name in rows:
            series: TimeSeries = getattr(snapshot, name)
            columns[name] = [_to_float(series[p]) for p in statement.periods]

        df = pd.DataFrame(columns, index=pd.Index(labels, name=REPORT_FRAME_INDEX))
        logger.debug(
            "Statement exported to frame",
            extra={"statement": type(statement).__name__, "rows": len(df)},
        )
        return df.astype("float64")

    def report_to_frame(self, report: MultiPeriodReport) -> pd.DataFrame:
        records = [
            {column: _to_float(getattr(summary, column)) for column in REPORT_FRAME_COLUMNS}
            for summary in report.period_summaries
        ]
        df = pd.DataFrame(
            records,
            columns=REPORT_FRAME_COLUMNS,
            index=pd.Index([p.label for p in report.periods], name=REPORT_FRAME_INDEX),
        )
        return df.astype(REPORT_FRAME_DTYPES)
