# finstat/entities/account.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Mapping, Optional, Union

from finstat.domain.numeric import T
from finstat.entities.entity import Entity
from finstat.entities.roles import BalanceSheetRole, CashFlowRole, IncomeStatementRole
from finstat.entities.time_series import TimeSeries


class StatementCategory(Enum):
    INCOME_STATEMENT = "income_statement"
    BALANCE_SHEET = "balance_sheet"
    CASH_FLOW_STATEMENT = "cash_flow_statement"


class AccountType(Enum):
    REVENUE = "revenue"
    EXPENSE = "expense"
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"

    @property
    def category(self) -> StatementCategory:
        return _CATEGORY[self]

    @property
    def is_debit_account(self) -> bool:
        return self in _DEBIT_ACCOUNTS


_CATEGORY = {
    AccountType.REVENUE: StatementCategory.INCOME_STATEMENT,
    AccountType.EXPENSE: StatementCategory.INCOME_STATEMENT,
    AccountType.ASSET: StatementCategory.BALANCE_SHEET,
    AccountType.LIABILITY: StatementCategory.BALANCE_SHEET,
    AccountType.EQUITY: StatementCategory.BALANCE_SHEET,
    AccountType.OPERATING: StatementCategory.CASH_FLOW_STATEMENT,
    AccountType.INVESTING: StatementCategory.CASH_FLOW_STATEMENT,
    AccountType.FINANCING: StatementCategory.CASH_FLOW_STATEMENT,
}

_DEBIT_ACCOUNTS = frozenset({
    AccountType.ASSET,
    AccountType.EXPENSE,
    AccountType.OPERATING,
    AccountType.INVESTING,
    AccountType.FINANCING,
})


class AssetType(Enum):
    CASH_AND_EQUIVALENTS = "cash_and_equivalents"
    RECEIVABLES = "receivables"
    INVENTORY = "inventory"
    PREPAID = "prepaid"
    FIXED_ASSETS = "fixed_assets"
    INTANGIBLES = "intangibles"
    INVESTMENTS = "investments"
    OTHER = "other"


class LiabilityType(Enum):
    PAYABLES = "payables"
    ACCRUED = "accrued"
    SHORT_TERM_DEBT = "short_term_debt"
    LONG_TERM_DEBT = "long_term_debt"
    DEFERRED_REVENUE = "deferred_revenue"
    OTHER = "other"


class EquityType(Enum):
    COMMON_STOCK = "common_stock"
    PREFERRED_STOCK = "preferred_stock"
    RETAINED_EARNINGS = "retained_earnings"
    TREASURY_STOCK = "treasury_stock"
    OTHER = "other"


class ExpenseType(Enum):
    COST_OF_GOODS_SOLD = "cost_of_goods_sold"
    OPERATING_EXPENSE = "operating_expense"
    DEPRECIATION_AMORTIZATION = "depreciation_amortization"
    INTEREST_EXPENSE = "interest_expense"
    TAX_EXPENSE = "tax_expense"
    OTHER = "other"


AccountSubtype = Union[AssetType, LiabilityType, EquityType, ExpenseType]

_SUBTYPES: dict[str, type[Enum]] = {
    cls.__name__: cls for cls in (AssetType, LiabilityType, EquityType, ExpenseType)
}


class CostBehavior(Enum):
    FIXED = "fixed"
    VARIABLE = "variable"


@dataclass(frozen=True)
class AccountMetadata:
    """
    Free-form descriptive data attached to an account.

    `category` is the legacy string classification ("Current", "COGS",
    "Operating", ...). Statements only look at it for accounts without a
    role; prefer BalanceSheetRole / IncomeStatementRole for new data.
    """

    category: Optional[str] = None
    sub_category: Optional[str] = None
    tags: tuple[str, ...] = ()
    description: Optional[str] = None
    external_account_type: Optional[str] = None
    external_detail_type: Optional[str] = None
    external_source_system: Optional[str] = None
    cost_behavior: Optional[CostBehavior] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", tuple(self.tags))
        if self.cost_behavior is not None and not isinstance(self.cost_behavior, CostBehavior):
            raise TypeError("cost_behavior must be a CostBehavior")

    @property
    def is_fixed_cost(self) -> Optional[bool]:
        if self.cost_behavior is None:
            return None
        return self.cost_behavior is CostBehavior.FIXED

    @property
    def is_variable_cost(self) -> Optional[bool]:
        if self.cost_behavior is None:
            return None
        return self.cost_behavior is CostBehavior.VARIABLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "sub_category": self.sub_category,
            "tags": list(self.tags),
            "description": self.description,
            "external_account_type": self.external_account_type,
            "external_detail_type": self.external_detail_type,
            "external_source_system": self.external_source_system,
            "cost_behavior": self.cost_behavior.value if self.cost_behavior else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AccountMetadata:
        cost_behavior = data.get("cost_behavior")
        return cls(
            category=data.get("category"),
            sub_category=data.get("sub_category"),
            tags=tuple(data.get("tags") or ()),
            description=data.get("description"),
            external_account_type=data.get("external_account_type"),
            external_detail_type=data.get("external_detail_type"),
            external_source_system=data.get("external_source_system"),
            cost_behavior=CostBehavior(cost_behavior) if cost_behavior else None,
        )


@dataclass(frozen=True)
class Account(Generic[T]):
    """
    One ledger line of one entity, backed by its own TimeSeries.

    No business validation happens here: whether the type and roles fit a
    statement is decided by the statement that consumes the account.
    """

    entity: Entity
    name: str
    type: AccountType
    time_series: TimeSeries[T]
    subtype: Optional[AccountSubtype] = None
    metadata: Optional[AccountMetadata] = None
    balance_sheet_role: Optional[BalanceSheetRole] = None
    income_statement_role: Optional[IncomeStatementRole] = None
    cash_flow_role: Optional[CashFlowRole] = None

    def __post_init__(self) -> None:
        if not isinstance(self.entity, Entity):
            raise TypeError("entity must be an Entity")
        if not isinstance(self.name, str):
            raise TypeError("name must be a string")
        if not isinstance(self.type, AccountType):
            raise TypeError("type must be an AccountType")
        if not isinstance(self.time_series, TimeSeries):
            raise TypeError("time_series must be a TimeSeries")
        if self.subtype is not None and type(self.subtype).__name__ not in _SUBTYPES:
            raise TypeError("subtype must be an AssetType, LiabilityType, EquityType or ExpenseType")
        if self.metadata is not None and not isinstance(self.metadata, AccountMetadata):
            raise TypeError("metadata must be an AccountMetadata")
        for attr, role_type in (
            ("balance_sheet_role", BalanceSheetRole),
            ("income_statement_role", IncomeStatementRole),
            ("cash_flow_role", CashFlowRole),
        ):
            role = getattr(self, attr)
            if role is not None and not isinstance(role, role_type):
                raise TypeError(f"{attr} must be a {role_type.__name__}")

    @property
    def category(self) -> StatementCategory:
        return self.type.category

    @property
    def is_income_statement(self) -> bool:
        return self.category is StatementCategory.INCOME_STATEMENT

    @property
    def is_balance_sheet(self) -> bool:
        return self.category is StatementCategory.BALANCE_SHEET

    @property
    def is_cash_flow(self) -> bool:
        return self.category is StatementCategory.CASH_FLOW_STATEMENT

    @property
    def is_debit_account(self) -> bool:
        return self.type.is_debit_account

    @property
    def legacy_category(self) -> Optional[str]:
        return self.metadata.category if self.metadata is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity.to_dict(),
            "name": self.name,
            "type": self.type.value,
            "time_series": self.time_series.to_dict(),
            "subtype": (
                {"enum": type(self.subtype).__name__, "value": self.subtype.value}
                if self.subtype is not None
                else None
            ),
            "metadata": self.metadata.to_dict() if self.metadata is not None else None,
            "balance_sheet_role": _enum_value(self.balance_sheet_role),
            "income_statement_role": _enum_value(self.income_statement_role),
            "cash_flow_role": _enum_value(self.cash_flow_role),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: type = float) -> Account:
        subtype = data.get("subtype")
        metadata = data.get("metadata")
        return cls(
            entity=Entity.from_dict(data["entity"]),
            name=data["name"],
            type=AccountType(data["type"]),
            time_series=TimeSeries.from_dict(data["time_series"], numeric_type),
            subtype=_SUBTYPES[subtype["enum"]](subtype["value"]) if subtype else None,
            metadata=AccountMetadata.from_dict(metadata) if metadata else None,
            balance_sheet_role=_enum_or_none(BalanceSheetRole, data.get("balance_sheet_role")),
            income_statement_role=_enum_or_none(IncomeStatementRole, data.get("income_statement_role")),
            cash_flow_role=_enum_or_none(CashFlowRole, data.get("cash_flow_role")),
        )


def _enum_value(member: Optional[Enum]) -> Optional[str]:
    return member.value if member is not None else None


def _enum_or_none(enum_cls: type[Enum], value: Optional[str]) -> Optional[Enum]:
    return enum_cls(value) if value is not None else None
