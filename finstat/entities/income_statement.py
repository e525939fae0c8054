# finstat/entities/income_statement.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence

from finstat.domain.numeric import T, numeric_type_name, resolve_numeric_type
from finstat.domain.services import account_classifier as classify
from finstat.domain.services.account_aggregator import (
    AccountAggregator,
    AggregationPolicy,
    infer_numeric_type,
    require_account_type,
    require_entity,
)
from finstat.entities.account import Account, AccountType
from finstat.entities.entity import Entity
from finstat.entities.period import Period
from finstat.entities.time_series import TimeSeries


@dataclass(frozen=True)
class IncomeStatementSnapshot(Generic[T]):
    total_revenue: TimeSeries[T]
    total_expenses: TimeSeries[T]
    net_income: TimeSeries[T]
    cost_of_revenue: TimeSeries[T]
    gross_profit: TimeSeries[T]
    operating_expenses: TimeSeries[T]
    operating_income: TimeSeries[T]
    depreciation_amortization: TimeSeries[T]
    ebitda: TimeSeries[T]
    interest_expense: TimeSeries[T]
    gross_margin: TimeSeries[T]
    operating_margin: TimeSeries[T]
    net_margin: TimeSeries[T]
    ebitda_margin: TimeSeries[T]


@dataclass(frozen=True)
class IncomeStatement(Generic[T]):
    """
    Revenue and expense accounts of one entity.

    Expense classification:
    - cost of revenue: IncomeStatementRole.COST_OF_REVENUE (legacy "COGS")
    - operating expenses, D&A included: role OPERATING_EXPENSE or
      DEPRECIATION_AMORTIZATION (legacy "Operating")
    - D&A for EBITDA: role DEPRECIATION_AMORTIZATION (legacy tag "D&A")

    operating_income = revenue - cost of revenue - operating expenses
    ebitda = operating_income + D&A
    net_income = revenue - every expense
    """

    entity: Entity
    periods: tuple[Period, ...]
    revenue_accounts: tuple[Account[T], ...] = ()
    expense_accounts: tuple[Account[T], ...] = ()
    aggregation_policy: Optional[AggregationPolicy] = None
    numeric_type: Optional[type] = None

    def __post_init__(self) -> None:
        for attr in ("periods", "revenue_accounts", "expense_accounts"):
            object.__setattr__(self, attr, tuple(getattr(self, attr)))

        if not isinstance(self.entity, Entity):
            raise TypeError("entity must be an Entity")
        if self.aggregation_policy is not None and not isinstance(self.aggregation_policy, AggregationPolicy):
            raise TypeError("aggregation_policy must be an AggregationPolicy")

        accounts = self.revenue_accounts + self.expense_accounts
        require_entity("IncomeStatement", self.entity, accounts)
        require_account_type(AccountType.REVENUE, self.revenue_accounts)
        require_account_type(AccountType.EXPENSE, self.expense_accounts)

        if self.numeric_type is None:
            object.__setattr__(self, "numeric_type", infer_numeric_type(accounts, default=None))

    @property
    def policy(self) -> AggregationPolicy:
        return self.aggregation_policy or AggregationPolicy.INTERSECTION

    @property
    def value_type(self) -> type:
        """numeric_type, float for a statement with no accounts and no declared type."""
        return self.numeric_type or float

    def _aggregate(self, accounts: Sequence[Account[T]], name: str) -> TimeSeries[T]:
        aggregator = AccountAggregator(self.periods, self.policy, self.value_type)
        return aggregator.aggregate(list(accounts), name=name)

    @property
    def total_revenue(self) -> TimeSeries[T]:
        return self._aggregate(self.revenue_accounts, "Total Revenue")

    @property
    def total_expenses(self) -> TimeSeries[T]:
        return self._aggregate(self.expense_accounts, "Total Expenses")

    @property
    def net_income(self) -> TimeSeries[T]:
        return self.total_revenue - self.total_expenses

    @property
    def cost_of_revenue(self) -> TimeSeries[T]:
        accounts = [a for a in self.expense_accounts if classify.is_cost_of_revenue(a)]
        return self._aggregate(accounts, "Cost of Revenue")

    @property
    def gross_profit(self) -> TimeSeries[T]:
        return self.total_revenue - self.cost_of_revenue

    @property
    def operating_expenses(self) -> TimeSeries[T]:
        accounts = [a for a in self.expense_accounts if classify.is_operating_expense(a)]
        return self._aggregate(accounts, "Operating Expenses")

    @property
    def operating_income(self) -> TimeSeries[T]:
        return self.gross_profit - self.operating_expenses

    @property
    def depreciation_amortization(self) -> TimeSeries[T]:
        accounts = [a for a in self.expense_accounts if classify.is_depreciation_amortization(a)]
        return self._aggregate(accounts, "Depreciation and Amortization")

    @property
    def ebitda(self) -> TimeSeries[T]:
        return self.operating_income + self.depreciation_amortization

    @property
    def interest_expense(self) -> TimeSeries[T]:
        accounts = [a for a in self.expense_accounts if classify.is_interest_expense(a)]
        return self._aggregate(accounts, "Interest Expense")

    @property
    def has_interest_expense(self) -> bool:
        return any(classify.is_interest_expense(a) for a in self.expense_accounts)

    @property
    def has_cost_of_revenue(self) -> bool:
        return any(classify.is_cost_of_revenue(a) for a in self.expense_accounts)

    # ---- margins ----

    @property
    def gross_margin(self) -> TimeSeries[T]:
        return self.gross_profit / self.total_revenue

    @property
    def operating_margin(self) -> TimeSeries[T]:
        return self.operating_income / self.total_revenue

    @property
    def net_margin(self) -> TimeSeries[T]:
        return self.net_income / self.total_revenue

    @property
    def ebitda_margin(self) -> TimeSeries[T]:
        return self.ebitda / self.total_revenue

    def materialize(self) -> IncomeStatementSnapshot[T]:
        return IncomeStatementSnapshot(
            total_revenue=self.total_revenue,
            total_expenses=self.total_expenses,
            net_income=self.net_income,
            cost_of_revenue=self.cost_of_revenue,
            gross_profit=self.gross_profit,
            operating_expenses=self.operating_expenses,
            operating_income=self.operating_income,
            depreciation_amortization=self.depreciation_amortization,
            ebitda=self.ebitda,
            interest_expense=self.interest_expense,
            gross_margin=self.gross_margin,
            operating_margin=self.operating_margin,
            net_margin=self.net_margin,
            ebitda_margin=self.ebitda_margin,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity.to_dict(),
            "periods": [p.to_dict() for p in self.periods],
            "revenue_accounts": [a.to_dict() for a in self.revenue_accounts],
            "expense_accounts": [a.to_dict() for a in self.expense_accounts],
            "aggregation_policy": self.aggregation_policy.value if self.aggregation_policy else None,
            "numeric_type": numeric_type_name(self.numeric_type) if self.numeric_type else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: Optional[type] = None) -> IncomeStatement:
        declared = data.get("numeric_type")
        numeric_type = numeric_type or (resolve_numeric_type(declared) if declared else None)
        account_type = numeric_type or float
        policy = data.get("aggregation_policy")
        return cls(
            entity=Entity.from_dict(data["entity"]),
            periods=tuple(Period.from_dict(p) for p in data["periods"]),
            revenue_accounts=tuple(Account.from_dict(a, account_type) for a in data["revenue_accounts"]),
            expense_accounts=tuple(Account.from_dict(a, account_type) for a in data["expense_accounts"]),
            aggregation_policy=AggregationPolicy(policy) if policy else None,
            numeric_type=numeric_type,
        )
