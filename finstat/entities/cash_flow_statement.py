# finstat/entities/cash_flow_statement.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence

from finstat.domain.numeric import T, numeric_type_name, resolve_numeric_type
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
from finstat.entities.roles import CashFlowRole
from finstat.entities.time_series import TimeSeries


@dataclass(frozen=True)
class CashFlowStatementSnapshot(Generic[T]):
    operating_cash_flow: TimeSeries[T]
    investing_cash_flow: TimeSeries[T]
    financing_cash_flow: TimeSeries[T]
    net_cash_flow: TimeSeries[T]
    free_cash_flow: TimeSeries[T]
    capital_expenditures: TimeSeries[T]


@dataclass(frozen=True)
class CashFlowStatement(Generic[T]):
    """
    Operating, investing and financing flows of one entity.

    Outflows are stored as negative values, so free cash flow is
    operating + investing.
    """

    entity: Entity
    periods: tuple[Period, ...]
    operating_accounts: tuple[Account[T], ...] = ()
    investing_accounts: tuple[Account[T], ...] = ()
    financing_accounts: tuple[Account[T], ...] = ()
    aggregation_policy: Optional[AggregationPolicy] = None
    numeric_type: Optional[type] = None

    def __post_init__(self) -> None:
        for attr in ("periods", "operating_accounts", "investing_accounts", "financing_accounts"):
            object.__setattr__(self, attr, tuple(getattr(self, attr)))

        if not isinstance(self.entity, Entity):
            raise TypeError("entity must be an Entity")
        if self.aggregation_policy is not None and not isinstance(self.aggregation_policy, AggregationPolicy):
            raise TypeError("aggregation_policy must be an AggregationPolicy")

        accounts = self.operating_accounts + self.investing_accounts + self.financing_accounts
        require_entity("CashFlowStatement", self.entity, accounts)
        require_account_type(AccountType.OPERATING, self.operating_accounts)
        require_account_type(AccountType.INVESTING, self.investing_accounts)
        require_account_type(AccountType.FINANCING, self.financing_accounts)

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
    def operating_cash_flow(self) -> TimeSeries[T]:
        return self._aggregate(self.operating_accounts, "Operating Cash Flow")

    @property
    def investing_cash_flow(self) -> TimeSeries[T]:
        return self._aggregate(self.investing_accounts, "Investing Cash Flow")

    @property
    def financing_cash_flow(self) -> TimeSeries[T]:
        return self._aggregate(self.financing_accounts, "Financing Cash Flow")

    @property
    def net_cash_flow(self) -> TimeSeries[T]:
        return self.operating_cash_flow + self.investing_cash_flow + self.financing_cash_flow

    @property
    def free_cash_flow(self) -> TimeSeries[T]:
        return self.operating_cash_flow + self.investing_cash_flow

    @property
    def capital_expenditures(self) -> TimeSeries[T]:
        accounts = [
            a for a in self.investing_accounts
            if a.cash_flow_role is CashFlowRole.CAPITAL_EXPENDITURES
        ]
        return self._aggregate(accounts, "Capital Expenditures")

    def materialize(self) -> CashFlowStatementSnapshot[T]:
        return CashFlowStatementSnapshot(
            operating_cash_flow=self.operating_cash_flow,
            investing_cash_flow=self.investing_cash_flow,
            financing_cash_flow=self.financing_cash_flow,
            net_cash_flow=self.net_cash_flow,
            free_cash_flow=self.free_cash_flow,
            capital_expenditures=self.capital_expenditures,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity.to_dict(),
            "periods": [p.to_dict() for p in self.periods],
            "operating_accounts": [a.to_dict() for a in self.operating_accounts],
            "investing_accounts": [a.to_dict() for a in self.investing_accounts],
            "financing_accounts": [a.to_dict() for a in self.financing_accounts],
            "aggregation_policy": self.aggregation_policy.value if self.aggregation_policy else None,
            "numeric_type": numeric_type_name(self.numeric_type) if self.numeric_type else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: Optional[type] = None) -> CashFlowStatement:
        declared = data.get("numeric_type")
        numeric_type = numeric_type or (resolve_numeric_type(declared) if declared else None)
        account_type = numeric_type or float
        policy = data.get("aggregation_policy")
        return cls(
            entity=Entity.from_dict(data["entity"]),
            periods=tuple(Period.from_dict(p) for p in data["periods"]),
            operating_accounts=tuple(Account.from_dict(a, account_type) for a in data["operating_accounts"]),
            investing_accounts=tuple(Account.from_dict(a, account_type) for a in data["investing_accounts"]),
            financing_accounts=tuple(Account.from_dict(a, account_type) for a in data["financing_accounts"]),
            aggregation_policy=AggregationPolicy(policy) if policy else None,
            numeric_type=numeric_type,
        )
