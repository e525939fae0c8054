# finstat/domain/services/financial_ratios.py

from __future__ import annotations

from typing import Callable, Union

from finstat.domain.errors import MissingAccountError
from finstat.domain.services import account_classifier as classify
from finstat.domain.services.account_aggregator import AccountAggregator
from finstat.entities.account import Account
from finstat.entities.balance_sheet import BalanceSheet
from finstat.entities.income_statement import IncomeStatement
from finstat.entities.time_series import TimeSeries, average_time_series

DAYS_PER_YEAR = 365

Statement = Union[BalanceSheet, IncomeStatement]


def _select(
    statement: Statement,
    accounts: tuple[Account, ...],
    predicate: Callable[[Account], bool],
    label: str,
) -> TimeSeries:
    """
    Sum of the accounts matching `predicate` under the statement's aggregation
    policy; MissingAccountError when none matches.
    """
    matching = [a for a in accounts if predicate(a)]
    if not matching:
        raise MissingAccountError(account=label, statement=type(statement).__name__)
    aggregator = AccountAggregator(statement.periods, statement.policy, statement.value_type)
    return aggregator.aggregate(matching, name=label)


def _zeros_when_missing(series: TimeSeries, accounts: list[Account], over: TimeSeries) -> TimeSeries:
    if accounts:
        return series
    return TimeSeries.zeros(over.periods, over.numeric_type or float)


# =========================
# Profitability
# =========================

def return_on_assets(income_statement: IncomeStatement, balance_sheet: BalanceSheet) -> TimeSeries:
    """Net income / average total assets."""
    return income_statement.net_income / average_time_series(balance_sheet.total_assets)


def return_on_equity(income_statement: IncomeStatement, balance_sheet: BalanceSheet) -> TimeSeries:
    """Net income / average total equity."""
    return income_statement.net_income / average_time_series(balance_sheet.total_equity)


# =========================
# Efficiency
# =========================

def asset_turnover(income_statement: IncomeStatement, balance_sheet: BalanceSheet) -> TimeSeries:
    return income_statement.total_revenue / average_time_series(balance_sheet.total_assets)


def inventory_turnover(income_statement: IncomeStatement, balance_sheet: BalanceSheet) -> TimeSeries:
    """Cost of revenue / average inventory."""
    cogs = _select(
        income_statement,
        income_statement.expense_accounts,
        classify.is_cost_of_revenue,
        "Cost of Goods Sold",
    )
    inventory = _select(balance_sheet, balance_sheet.asset_accounts, classify.is_inventory, "Inventory")
    return cogs / average_time_series(inventory)


def receivables_turnover(income_statement: IncomeStatement, balance_sheet: BalanceSheet) -> TimeSeries:
    """Revenue / average accounts receivable."""
    receivables = _select(
        balance_sheet,
        balance_sheet.asset_accounts,
        classify.is_receivable,
        "Accounts Receivable",
    )
    return income_statement.total_revenue / average_time_series(receivables)


def days_inventory_outstanding(income_statement: IncomeStatement, balance_sheet: BalanceSheet) -> TimeSeries:
    turnover = inventory_turnover(income_statement, balance_sheet)
    return _days_over(turnover)


def days_sales_outstanding(income_statement: IncomeStatement, balance_sheet: BalanceSheet) -> TimeSeries:
    turnover = receivables_turnover(income_statement, balance_sheet)
    return _days_over(turnover)


def days_payable_outstanding(income_statement: IncomeStatement, balance_sheet: BalanceSheet) -> TimeSeries:
    """Average payables / cost of revenue, in days."""
    cogs = _select(
        income_statement,
        income_statement.expense_accounts,
        classify.is_cost_of_revenue,
        "Cost of Goods Sold",
    )
    payables = _select(
        balance_sheet,
        balance_sheet.liability_accounts,
        classify.is_payable,
        "Accounts Payable",
    )
    ratio = average_time_series(payables) / cogs
    return ratio.map_values(lambda v: v * type(v)(DAYS_PER_YEAR))


def _days_over(turnover: TimeSeries) -> TimeSeries:
    # 365 / turnover; zero turnover leaves the period out
    return turnover.filter_values(lambda v: v != 0).map_values(lambda v: type(v)(DAYS_PER_YEAR) / v)


# =========================
# Solvency
# =========================

def interest_coverage(income_statement: IncomeStatement) -> TimeSeries:
    """Operating income / interest expense."""
    interest = _select(
        income_statement,
        income_statement.expense_accounts,
        classify.is_interest_expense,
        "Interest Expense",
    )
    return income_statement.operating_income / interest


def debt_service_coverage(
    income_statement: IncomeStatement,
    principal_payments: TimeSeries,
    interest_payments: TimeSeries,
) -> TimeSeries:
    return income_statement.operating_income / (principal_payments + interest_payments)


# =========================
# Valuation
# =========================

def market_capitalization(market_price: TimeSeries, shares_outstanding: TimeSeries) -> TimeSeries:
    return market_price * shares_outstanding


def enterprise_value(
    balance_sheet: BalanceSheet,
    market_price: TimeSeries,
    shares_outstanding: TimeSeries,
) -> TimeSeries:
    """Market cap + interest-bearing debt - cash; missing debt or cash reads as zero."""
    market_cap = market_capitalization(market_price, shares_outstanding)
    debt_accounts = [a for a in balance_sheet.liability_accounts if classify.is_debt(a)]
    cash_accounts = [a for a in balance_sheet.asset_accounts if classify.is_cash(a)]
    debt = _zeros_when_missing(balance_sheet.interest_bearing_debt, debt_accounts, market_cap)
    cash = _zeros_when_missing(balance_sheet.cash_and_equivalents, cash_accounts, market_cap)
    return market_cap + debt - cash


def earnings_per_share(income_statement: IncomeStatement, shares_outstanding: TimeSeries) -> TimeSeries:
    return income_statement.net_income / shares_outstanding


def price_to_earnings(
    income_statement: IncomeStatement,
    market_price: TimeSeries,
    shares_outstanding: TimeSeries,
) -> TimeSeries:
    return market_price / earnings_per_share(income_statement, shares_outstanding)


def price_to_book(
    balance_sheet: BalanceSheet,
    market_price: TimeSeries,
    shares_outstanding: TimeSeries,
) -> TimeSeries:
    book_value_per_share = balance_sheet.total_equity / shares_outstanding
    return market_price / book_value_per_share


def price_to_sales(
    income_statement: IncomeStatement,
    market_price: TimeSeries,
    shares_outstanding: TimeSeries,
) -> TimeSeries:
    market_cap = market_capitalization(market_price, shares_outstanding)
    return market_cap / income_statement.total_revenue


def ev_to_ebitda(
    income_statement: IncomeStatement,
    balance_sheet: BalanceSheet,
    market_price: TimeSeries,
    shares_outstanding: TimeSeries,
) -> TimeSeries:
    ev = enterprise_value(balance_sheet, market_price, shares_outstanding)
    return ev / income_statement.ebitda


def ev_to_sales(
    income_statement: IncomeStatement,
    balance_sheet: BalanceSheet,
    market_price: TimeSeries,
    shares_outstanding: TimeSeries,
) -> TimeSeries:
    ev = enterprise_value(balance_sheet, market_price, shares_outstanding)
    return ev / income_statement.total_revenue
