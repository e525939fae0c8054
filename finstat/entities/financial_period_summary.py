# finstat/entities/financial_period_summary.py

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional

from finstat.domain.errors import EntityMismatchError, MissingAccountError
from finstat.domain.numeric import T, coerce, encode_number, numeric_type_name, resolve_numeric_type, safe_divide
from finstat.domain.services import financial_ratios as ratios
from finstat.entities.balance_sheet import BalanceSheet
from finstat.entities.cash_flow_statement import CashFlowStatement
from finstat.entities.entity import Entity
from finstat.entities.income_statement import IncomeStatement
from finstat.entities.operational_metrics import OperationalMetrics
from finstat.entities.period import Period
from finstat.entities.time_series import TimeSeries


@dataclass(frozen=True)
class MarketData(Generic[T]):
    price: TimeSeries[T]
    shares_outstanding: TimeSeries[T]

    def __post_init__(self) -> None:
        if not isinstance(self.price, TimeSeries) or not isinstance(self.shares_outstanding, TimeSeries):
            raise TypeError("price and shares_outstanding must be TimeSeries")

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": self.price.to_dict(),
            "shares_outstanding": self.shares_outstanding.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: type = float) -> MarketData:
        return cls(
            price=TimeSeries.from_dict(data["price"], numeric_type),
            shares_outstanding=TimeSeries.from_dict(data["shares_outstanding"], numeric_type),
        )


# Fields holding one numeric value (possibly None); drives the keyed encoding
_VALUE_FIELDS = (
    "revenue", "gross_profit", "operating_income", "ebitda", "net_income",
    "gross_margin", "operating_margin", "net_margin",
    "total_assets", "current_assets", "total_liabilities", "current_liabilities",
    "total_equity", "working_capital", "cash", "debt", "net_debt",
    "operating_cash_flow", "investing_cash_flow", "financing_cash_flow",
    "free_cash_flow", "net_cash_flow",
    "roa", "roe", "current_ratio", "quick_ratio", "cash_ratio",
    "debt_to_equity", "debt_to_assets", "equity_ratio",
    "asset_turnover", "inventory_turnover", "receivables_turnover",
    "debt_to_ebitda", "net_debt_to_ebitda", "interest_coverage",
    "shares_outstanding", "eps", "market_cap", "enterprise_value",
    "pe_ratio", "pb_ratio", "ps_ratio", "ev_to_ebitda",
)


@dataclass(frozen=True)
class FinancialPeriodSummary(Generic[T]):
    """
    One entity, one period: headline values and ratios from all statements.

    Rules:
    - a statement total missing for the period reads as zero
    - a ratio whose denominator is zero (or whose inputs are missing) is None
    - cash flow fields are None without a cash flow statement
    - per-share and valuation fields are None without market data
    """

    entity: Entity
    period: Period

    revenue: T
    gross_profit: T
    operating_income: T
    ebitda: T
    net_income: T
    gross_margin: Optional[T]
    operating_margin: Optional[T]
    net_margin: Optional[T]

    total_assets: T
    current_assets: T
    total_liabilities: T
    current_liabilities: T
    total_equity: T
    working_capital: T
    cash: T
    debt: T
    net_debt: T

    operating_cash_flow: Optional[T] = None
    investing_cash_flow: Optional[T] = None
    financing_cash_flow: Optional[T] = None
    free_cash_flow: Optional[T] = None
    net_cash_flow: Optional[T] = None

    roa: Optional[T] = None
    roe: Optional[T] = None
    current_ratio: Optional[T] = None
    quick_ratio: Optional[T] = None
    cash_ratio: Optional[T] = None
    debt_to_equity: Optional[T] = None
    debt_to_assets: Optional[T] = None
    equity_ratio: Optional[T] = None

    asset_turnover: Optional[T] = None
    inventory_turnover: Optional[T] = None
    receivables_turnover: Optional[T] = None

    debt_to_ebitda: Optional[T] = None
    net_debt_to_ebitda: Optional[T] = None
    interest_coverage: Optional[T] = None

    shares_outstanding: Optional[T] = None
    eps: Optional[T] = None
    market_cap: Optional[T] = None
    enterprise_value: Optional[T] = None
    pe_ratio: Optional[T] = None
    pb_ratio: Optional[T] = None
    ps_ratio: Optional[T] = None
    ev_to_ebitda: Optional[T] = None

    operational_metrics: Optional[OperationalMetrics[T]] = None
    numeric_type: type = float

    @classmethod
    def build(
        cls,
        entity: Entity,
        period: Period,
        income_statement: IncomeStatement[T],
        balance_sheet: BalanceSheet[T],
        cash_flow_statement: Optional[CashFlowStatement[T]] = None,
        market_data: Optional[MarketData[T]] = None,
        operational_metrics: Optional[OperationalMetrics[T]] = None,
    ) -> FinancialPeriodSummary[T]:
        for statement, statement_entity in (
            ("IncomeStatement", income_statement.entity),
            ("BalanceSheet", balance_sheet.entity),
            ("CashFlowStatement", cash_flow_statement.entity if cash_flow_statement else entity),
        ):
            if statement_entity != entity:
                raise EntityMismatchError(
                    statement="FinancialPeriodSummary",
                    expected=entity.id,
                    actual=statement_entity.id,
                    account=statement,
                )

        numeric_type = _shared_numeric_type(income_statement, balance_sheet, cash_flow_statement)
        income_statement = _with_numeric_type(income_statement, numeric_type)
        balance_sheet = _with_numeric_type(balance_sheet, numeric_type)
        if cash_flow_statement is not None:
            cash_flow_statement = _with_numeric_type(cash_flow_statement, numeric_type)
        zero = numeric_type(0)

        def at(series: TimeSeries[T]) -> T:
            value = series[period]
            return zero if value is None else value

        revenue = at(income_statement.total_revenue)
        gross_profit = at(income_statement.gross_profit)
        operating_income = at(income_statement.operating_income)
        ebitda = at(income_statement.ebitda)
        net_income = at(income_statement.net_income)

        current_assets = at(balance_sheet.current_assets)
        current_liabilities = at(balance_sheet.current_liabilities)
        cash = at(balance_sheet.cash_and_equivalents)
        debt = at(balance_sheet.interest_bearing_debt)
        net_debt = debt - cash

        values: dict[str, Any] = {
            "revenue": revenue,
            "gross_profit": gross_profit,
            "operating_income": operating_income,
            "ebitda": ebitda,
            "net_income": net_income,
            "gross_margin": safe_divide(gross_profit, revenue),
            "operating_margin": safe_divide(operating_income, revenue),
            "net_margin": safe_divide(net_income, revenue),
            "total_assets": at(balance_sheet.total_assets),
            "current_assets": current_assets,
            "total_liabilities": at(balance_sheet.total_liabilities),
            "current_liabilities": current_liabilities,
            "total_equity": at(balance_sheet.total_equity),
            "working_capital": current_assets - current_liabilities,
            "cash": cash,
            "debt": debt,
            "net_debt": net_debt,
            "roa": ratios.return_on_assets(income_statement, balance_sheet)[period],
            "roe": ratios.return_on_equity(income_statement, balance_sheet)[period],
            "current_ratio": balance_sheet.current_ratio[period],
            "quick_ratio": balance_sheet.quick_ratio[period],
            "cash_ratio": balance_sheet.cash_ratio[period],
            "debt_to_equity": balance_sheet.debt_to_equity[period],
            "debt_to_assets": balance_sheet.debt_ratio[period],
            "equity_ratio": balance_sheet.equity_ratio[period],
            "asset_turnover": ratios.asset_turnover(income_statement, balance_sheet)[period],
            "inventory_turnover": _optional_ratio(ratios.inventory_turnover, income_statement, balance_sheet, period=period),
            "receivables_turnover": _optional_ratio(ratios.receivables_turnover, income_statement, balance_sheet, period=period),
            "debt_to_ebitda": safe_divide(debt, ebitda),
            "net_debt_to_ebitda": safe_divide(net_debt, ebitda),
            "interest_coverage": _optional_ratio(ratios.interest_coverage, income_statement, period=period),
        }

        if cash_flow_statement is not None:
            values.update({
                "operating_cash_flow": cash_flow_statement.operating_cash_flow[period],
                "investing_cash_flow": cash_flow_statement.investing_cash_flow[period],
                "financing_cash_flow": cash_flow_statement.financing_cash_flow[period],
                "free_cash_flow": cash_flow_statement.free_cash_flow[period],
                "net_cash_flow": cash_flow_statement.net_cash_flow[period],
            })

        if market_data is not None:
            price = market_data.price
            shares = market_data.shares_outstanding
            pe = ratios.price_to_earnings(income_statement, price, shares)[period]
            values.update({
                "shares_outstanding": shares[period],
                "eps": ratios.earnings_per_share(income_statement, shares)[period],
                "market_cap": ratios.market_capitalization(price, shares)[period],
                "enterprise_value": ratios.enterprise_value(balance_sheet, price, shares)[period],
                # negative earnings make P/E meaningless
                "pe_ratio": pe if pe is not None and pe > 0 else None,
                "pb_ratio": ratios.price_to_book(balance_sheet, price, shares)[period],
                "ps_ratio": ratios.price_to_sales(income_statement, price, shares)[period],
                "ev_to_ebitda": ratios.ev_to_ebitda(income_statement, balance_sheet, price, shares)[period],
            })

        return cls(
            entity=entity,
            period=period,
            operational_metrics=operational_metrics,
            numeric_type=numeric_type,
            **values,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "entity": self.entity.to_dict(),
            "period": self.period.to_dict(),
            "numeric_type": numeric_type_name(self.numeric_type),
        }
        for name in _VALUE_FIELDS:
            data[name] = encode_number(getattr(self, name))
        data["operational_metrics"] = (
            self.operational_metrics.to_dict() if self.operational_metrics else None
        )
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: Optional[type] = None) -> FinancialPeriodSummary:
        numeric_type = numeric_type or resolve_numeric_type(data.get("numeric_type", "float"))
        values = {
            name: coerce(data[name], numeric_type) if data.get(name) is not None else None
            for name in _VALUE_FIELDS
        }
        metrics = data.get("operational_metrics")
        return cls(
            entity=Entity.from_dict(data["entity"]),
            period=Period.from_dict(data["period"]),
            operational_metrics=OperationalMetrics.from_dict(metrics, numeric_type) if metrics else None,
            numeric_type=numeric_type,
            **values,
        )


def _optional_ratio(function, *statements, period: Period):
    """Ratio value at `period`, or None when a required account is missing."""
    try:
        return function(*statements)[period]
    except MissingAccountError:
        return None



def _shared_numeric_type(*statements) -> type:
    """Type of the first statement holding accounts; float when none does."""
    for statement in statements:
        if statement is not None and statement.numeric_type is not None:
            return statement.numeric_type
    return float


def _with_numeric_type(statement, numeric_type: type):
    # an account-less statement takes the type of the statements it is summarized with
    if statement.numeric_type is not None:
        return statement
    return dataclasses.replace(statement, numeric_type=numeric_type)
