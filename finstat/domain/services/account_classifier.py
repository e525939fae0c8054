# finstat/domain/services/account_classifier.py

from __future__ import annotations

from finstat.entities.account import Account
from finstat.entities.roles import BalanceSheetRole

# Legacy free-form classification values carried in AccountMetadata.category
LEGACY_CURRENT = "Current"
LEGACY_LONG_TERM = "Long-Term"
LEGACY_COGS = "COGS"
LEGACY_OPERATING = "Operating"
LEGACY_DA_TAG = "D&A"

_CASH_NAME_TOKENS = ("cash", "cash equivalent", "marketable securities")
_DEBT_NAME_TOKENS = ("debt", "borrowing", "bond", "note")
_COGS_NAME_TOKENS = ("cost of goods sold", "cogs")


def _name_contains(account: Account, tokens: tuple[str, ...]) -> bool:
    name = account.name.lower()
    return any(token in name for token in tokens)


def _legacy_category(account: Account) -> str | None:
    return account.metadata.category if account.metadata is not None else None


def _has_tag(account: Account, tag: str) -> bool:
    return account.metadata is not None and tag in account.metadata.tags


# ---- balance sheet ----
#
# An account tagged with a BalanceSheetRole is classified by the role only.
# The metadata/name rules below apply to role-less accounts and exist for
# data produced before roles were introduced.


def is_current_asset(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role.is_current_asset
    return _legacy_category(account) == LEGACY_CURRENT


def is_non_current_asset(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role.is_non_current_asset
    return _legacy_category(account) != LEGACY_CURRENT


def is_current_liability(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role.is_current_liability
    return _legacy_category(account) == LEGACY_CURRENT


def is_non_current_liability(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role.is_non_current_liability
    return _legacy_category(account) != LEGACY_CURRENT


def is_inventory(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role is BalanceSheetRole.INVENTORY
    return is_current_asset(account) and "inventory" in account.name.lower()


def is_receivable(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role is BalanceSheetRole.ACCOUNTS_RECEIVABLE
    return "receivable" in account.name.lower()


def is_payable(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role is BalanceSheetRole.ACCOUNTS_PAYABLE
    return "payable" in account.name.lower()


def is_cash(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role.is_cash_equivalent
    return is_current_asset(account) and _name_contains(account, _CASH_NAME_TOKENS)


def is_debt(account: Account) -> bool:
    role = account.balance_sheet_role
    if role is not None:
        return role.is_debt
    if _name_contains(account, _DEBT_NAME_TOKENS):
        return True
    return _legacy_category(account) == LEGACY_LONG_TERM and "deferred" not in account.name.lower()


# ---- income statement ----


def is_cost_of_revenue(account: Account) -> bool:
    role = account.income_statement_role
    if role is not None:
        return role.is_cost_of_revenue
    return _legacy_category(account) == LEGACY_COGS or _name_contains(account, _COGS_NAME_TOKENS)


def is_operating_expense(account: Account) -> bool:
    role = account.income_statement_role
    if role is not None:
        return role.is_operating_expense
    return _legacy_category(account) == LEGACY_OPERATING


def is_depreciation_amortization(account: Account) -> bool:
    role = account.income_statement_role
    if role is not None:
        return role.is_depreciation_amortization
    return _has_tag(account, LEGACY_DA_TAG)


def is_interest_expense(account: Account) -> bool:
    role = account.income_statement_role
    if role is not None:
        return role.is_interest_expense
    return "interest" in account.name.lower()
