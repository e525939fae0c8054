# finstat/entities/roles.py

from __future__ import annotations

from enum import Enum


class BalanceSheetRole(Enum):
    """
    Fine-grained balance sheet classification, orthogonal to AccountType.

    Predicates are lookups in the fixed tables below; roles carry no state.
    """

    # current assets
    CASH_AND_EQUIVALENTS = "cash_and_equivalents"
    SHORT_TERM_INVESTMENTS = "short_term_investments"
    ACCOUNTS_RECEIVABLE = "accounts_receivable"
    INVENTORY = "inventory"
    PREPAID_EXPENSES = "prepaid_expenses"
    OTHER_CURRENT_ASSETS = "other_current_assets"

    # non-current assets
    PROPERTY_PLANT_EQUIPMENT = "property_plant_equipment"
    ACCUMULATED_DEPRECIATION = "accumulated_depreciation"
    INTANGIBLE_ASSETS = "intangible_assets"
    GOODWILL = "goodwill"
    LONG_TERM_INVESTMENTS = "long_term_investments"
    DEFERRED_TAX_ASSETS = "deferred_tax_assets"
    RIGHT_OF_USE_ASSETS = "right_of_use_assets"
    OTHER_NON_CURRENT_ASSETS = "other_non_current_assets"

    # current liabilities
    ACCOUNTS_PAYABLE = "accounts_payable"
    ACCRUED_LIABILITIES = "accrued_liabilities"
    SHORT_TERM_DEBT = "short_term_debt"
    CURRENT_PORTION_LONG_TERM_DEBT = "current_portion_long_term_debt"
    DEFERRED_REVENUE = "deferred_revenue"
    OTHER_CURRENT_LIABILITIES = "other_current_liabilities"

    # non-current liabilities
    LONG_TERM_DEBT = "long_term_debt"
    DEFERRED_TAX_LIABILITIES = "deferred_tax_liabilities"
    LEASE_LIABILITIES = "lease_liabilities"
    PENSION_LIABILITIES = "pension_liabilities"
    OTHER_NON_CURRENT_LIABILITIES = "other_non_current_liabilities"

    # equity
    COMMON_STOCK = "common_stock"
    PREFERRED_STOCK = "preferred_stock"
    ADDITIONAL_PAID_IN_CAPITAL = "additional_paid_in_capital"
    RETAINED_EARNINGS = "retained_earnings"
    TREASURY_STOCK = "treasury_stock"
    ACCUMULATED_OTHER_COMPREHENSIVE_INCOME = "accumulated_other_comprehensive_income"

    @property
    def is_current_asset(self) -> bool:
        return self in _CURRENT_ASSETS

    @property
    def is_non_current_asset(self) -> bool:
        return self in _NON_CURRENT_ASSETS

    @property
    def is_asset(self) -> bool:
        return self.is_current_asset or self.is_non_current_asset

    @property
    def is_current_liability(self) -> bool:
        return self in _CURRENT_LIABILITIES

    @property
    def is_non_current_liability(self) -> bool:
        return self in _NON_CURRENT_LIABILITIES

    @property
    def is_liability(self) -> bool:
        return self.is_current_liability or self.is_non_current_liability

    @property
    def is_equity(self) -> bool:
        return self in _EQUITY

    @property
    def is_debt(self) -> bool:
        return self in _DEBT

    @property
    def is_cash_equivalent(self) -> bool:
        return self in _CASH_EQUIVALENTS

    @property
    def is_working_capital(self) -> bool:
        # operating working capital excludes cash and interest-bearing debt
        return (self.is_current_asset or self.is_current_liability) and not (
            self.is_cash_equivalent or self.is_debt
        )


_CURRENT_ASSETS = frozenset({
    BalanceSheetRole.CASH_AND_EQUIVALENTS,
    BalanceSheetRole.SHORT_TERM_INVESTMENTS,
    BalanceSheetRole.ACCOUNTS_RECEIVABLE,
    BalanceSheetRole.INVENTORY,
    BalanceSheetRole.PREPAID_EXPENSES,
    BalanceSheetRole.OTHER_CURRENT_ASSETS,
})

_NON_CURRENT_ASSETS = frozenset({
    BalanceSheetRole.PROPERTY_PLANT_EQUIPMENT,
    BalanceSheetRole.ACCUMULATED_DEPRECIATION,
    BalanceSheetRole.INTANGIBLE_ASSETS,
    BalanceSheetRole.GOODWILL,
    BalanceSheetRole.LONG_TERM_INVESTMENTS,
    BalanceSheetRole.DEFERRED_TAX_ASSETS,
    BalanceSheetRole.RIGHT_OF_USE_ASSETS,
    BalanceSheetRole.OTHER_NON_CURRENT_ASSETS,
})

_CURRENT_LIABILITIES = frozenset({
    BalanceSheetRole.ACCOUNTS_PAYABLE,
    BalanceSheetRole.ACCRUED_LIABILITIES,
    BalanceSheetRole.SHORT_TERM_DEBT,
    BalanceSheetRole.CURRENT_PORTION_LONG_TERM_DEBT,
    BalanceSheetRole.DEFERRED_REVENUE,
    BalanceSheetRole.OTHER_CURRENT_LIABILITIES,
})

_NON_CURRENT_LIABILITIES = frozenset({
    BalanceSheetRole.LONG_TERM_DEBT,
    BalanceSheetRole.DEFERRED_TAX_LIABILITIES,
    BalanceSheetRole.LEASE_LIABILITIES,
    BalanceSheetRole.PENSION_LIABILITIES,
    BalanceSheetRole.OTHER_NON_CURRENT_LIABILITIES,
})

_EQUITY = frozenset({
    BalanceSheetRole.COMMON_STOCK,
    BalanceSheetRole.PREFERRED_STOCK,
    BalanceSheetRole.ADDITIONAL_PAID_IN_CAPITAL,
    BalanceSheetRole.RETAINED_EARNINGS,
    BalanceSheetRole.TREASURY_STOCK,
    BalanceSheetRole.ACCUMULATED_OTHER_COMPREHENSIVE_INCOME,
})

_DEBT = frozenset({
    BalanceSheetRole.SHORT_TERM_DEBT,
    BalanceSheetRole.CURRENT_PORTION_LONG_TERM_DEBT,
    BalanceSheetRole.LONG_TERM_DEBT,
    BalanceSheetRole.LEASE_LIABILITIES,
})

_CASH_EQUIVALENTS = frozenset({
    BalanceSheetRole.CASH_AND_EQUIVALENTS,
    BalanceSheetRole.SHORT_TERM_INVESTMENTS,
})


class IncomeStatementRole(Enum):
    REVENUE = "revenue"
    COST_OF_REVENUE = "cost_of_revenue"
    OPERATING_EXPENSE = "operating_expense"
    DEPRECIATION_AMORTIZATION = "depreciation_amortization"
    INTEREST_EXPENSE = "interest_expense"
    INCOME_TAX = "income_tax"
    OTHER = "other"

    @property
    def is_cost_of_revenue(self) -> bool:
        return self is IncomeStatementRole.COST_OF_REVENUE

    @property
    def is_operating_expense(self) -> bool:
        # D&A is an operating expense that EBITDA later adds back
        return self in _OPERATING_EXPENSES

    @property
    def is_depreciation_amortization(self) -> bool:
        return self is IncomeStatementRole.DEPRECIATION_AMORTIZATION

    @property
    def is_interest_expense(self) -> bool:
        return self is IncomeStatementRole.INTEREST_EXPENSE


_OPERATING_EXPENSES = frozenset({
    IncomeStatementRole.OPERATING_EXPENSE,
    IncomeStatementRole.DEPRECIATION_AMORTIZATION,
})


class CashFlowRole(Enum):
    # operating
    NET_INCOME = "net_income"
    DEPRECIATION_AMORTIZATION_ADDBACK = "depreciation_amortization_addback"
    STOCK_BASED_COMPENSATION_ADDBACK = "stock_based_compensation_addback"
    DEFERRED_TAXES = "deferred_taxes"
    CHANGE_IN_RECEIVABLES = "change_in_receivables"
    CHANGE_IN_INVENTORY = "change_in_inventory"
    CHANGE_IN_PAYABLES = "change_in_payables"
    CHANGE_IN_ACCRUED_EXPENSES = "change_in_accrued_expenses"
    OTHER_OPERATING_ACTIVITIES = "other_operating_activities"

    # investing
    CAPITAL_EXPENDITURES = "capital_expenditures"
    ACQUISITIONS = "acquisitions"
    PROCEEDS_FROM_ASSET_SALES = "proceeds_from_asset_sales"
    PURCHASE_OF_INVESTMENTS = "purchase_of_investments"
    PROCEEDS_FROM_INVESTMENTS = "proceeds_from_investments"
    OTHER_INVESTING_ACTIVITIES = "other_investing_activities"

    # financing
    PROCEEDS_FROM_DEBT = "proceeds_from_debt"
    REPAYMENT_OF_DEBT = "repayment_of_debt"
    PROCEEDS_FROM_EQUITY = "proceeds_from_equity"
    REPURCHASE_OF_EQUITY = "repurchase_of_equity"
    DIVIDENDS_PAID = "dividends_paid"
    OTHER_FINANCING_ACTIVITIES = "other_financing_activities"

    @property
    def is_operating(self) -> bool:
        return self in _OPERATING_FLOWS

    @property
    def is_investing(self) -> bool:
        return self in _INVESTING_FLOWS

    @property
    def is_financing(self) -> bool:
        return self in _FINANCING_FLOWS

    @property
    def uses_change_in_balance(self) -> bool:
        return self in _BALANCE_CHANGES


_OPERATING_FLOWS = frozenset({
    CashFlowRole.NET_INCOME,
    CashFlowRole.DEPRECIATION_AMORTIZATION_ADDBACK,
    CashFlowRole.STOCK_BASED_COMPENSATION_ADDBACK,
    CashFlowRole.DEFERRED_TAXES,
    CashFlowRole.CHANGE_IN_RECEIVABLES,
    CashFlowRole.CHANGE_IN_INVENTORY,
    CashFlowRole.CHANGE_IN_PAYABLES,
    CashFlowRole.CHANGE_IN_ACCRUED_EXPENSES,
    CashFlowRole.OTHER_OPERATING_ACTIVITIES,
})

_INVESTING_FLOWS = frozenset({
    CashFlowRole.CAPITAL_EXPENDITURES,
    CashFlowRole.ACQUISITIONS,
    CashFlowRole.PROCEEDS_FROM_ASSET_SALES,
    CashFlowRole.PURCHASE_OF_INVESTMENTS,
    CashFlowRole.PROCEEDS_FROM_INVESTMENTS,
    CashFlowRole.OTHER_INVESTING_ACTIVITIES,
})

_FINANCING_FLOWS = frozenset({
    CashFlowRole.PROCEEDS_FROM_DEBT,
    CashFlowRole.REPAYMENT_OF_DEBT,
    CashFlowRole.PROCEEDS_FROM_EQUITY,
    CashFlowRole.REPURCHASE_OF_EQUITY,
    CashFlowRole.DIVIDENDS_PAID,
    CashFlowRole.OTHER_FINANCING_ACTIVITIES,
})

_BALANCE_CHANGES = frozenset({
    CashFlowRole.CHANGE_IN_RECEIVABLES,
    CashFlowRole.CHANGE_IN_INVENTORY,
    CashFlowRole.CHANGE_IN_PAYABLES,
    CashFlowRole.CHANGE_IN_ACCRUED_EXPENSES,
})
