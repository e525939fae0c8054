# finstat/entities/balance_sheet.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence

from finstat.domain.errors import AccountingEquationViolation
from finstat.domain.numeric import T, coerce, numeric_type_name, resolve_numeric_type
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

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceSheetSnapshot(Generic[T]):
    """Every derived balance sheet metric, computed once."""

    total_assets: TimeSeries[T]
    total_liabilities: TimeSeries[T]
    total_equity: TimeSeries[T]
    current_assets: TimeSeries[T]
    current_liabilities: TimeSeries[T]
    non_current_assets: TimeSeries[T]
    non_current_liabilities: TimeSeries[T]
    working_capital: TimeSeries[T]
    cash_and_equivalents: TimeSeries[T]
    interest_bearing_debt: TimeSeries[T]
    net_debt: TimeSeries[T]
    current_ratio: TimeSeries[T]
    quick_ratio: TimeSeries[T]
    cash_ratio: TimeSeries[T]
    debt_to_equity: TimeSeries[T]
    equity_ratio: TimeSeries[T]
    debt_ratio: TimeSeries[T]


@dataclass(frozen=True)
class BalanceSheet(Generic[T]):
    """
    Assets, liabilities and equity of one entity over a shared list of periods.

    Construction checks (eager, the object never exists in a bad state):
    - every account belongs to `entity`
    - asset_accounts are ASSET, liability_accounts LIABILITY, equity_accounts EQUITY

    The accounting equation is not enforced here; call `validate(tolerance)`.
    Totals and ratios are recomputed on each access; use `materialize()` to
    compute them once.

    Division policy: a ratio has no entry for a period whose denominator is
    zero. Aggregation policy: see AggregationPolicy (None means INTERSECTION).
    """

    entity: Entity
    periods: tuple[Period, ...]
    asset_accounts: tuple[Account[T], ...] = ()
    liability_accounts: tuple[Account[T], ...] = ()
    equity_accounts: tuple[Account[T], ...] = ()
    aggregation_policy: Optional[AggregationPolicy] = None
    numeric_type: Optional[type] = None

    def __post_init__(self) -> None:
        for attr in ("periods", "asset_accounts", "liability_accounts", "equity_accounts"):
            object.__setattr__(self, attr, tuple(getattr(self, attr)))

        if not isinstance(self.entity, Entity):
            raise TypeError("entity must be an Entity")
        if self.aggregation_policy is not None and not isinstance(self.aggregation_policy, AggregationPolicy):
            raise TypeError("aggregation_policy must be an AggregationPolicy")

        accounts = self.all_accounts
        require_entity("BalanceSheet", self.entity, accounts)
        require_account_type(AccountType.ASSET, self.asset_accounts)
        require_account_type(AccountType.LIABILITY, self.liability_accounts)
        require_account_type(AccountType.EQUITY, self.equity_accounts)

        if self.numeric_type is None:
            object.__setattr__(self, "numeric_type", infer_numeric_type(accounts, default=None))

    @property
    def all_accounts(self) -> tuple[Account[T], ...]:
        return self.asset_accounts + self.liability_accounts + self.equity_accounts

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

    def _zeros_over(self, series: TimeSeries[T]) -> TimeSeries[T]:
        return TimeSeries.zeros(series.periods, self.value_type)

    # ---- totals ----

    @property
    def total_assets(self) -> TimeSeries[T]:
        return self._aggregate(self.asset_accounts, "Total Assets")

    @property
    def total_liabilities(self) -> TimeSeries[T]:
        return self._aggregate(self.liability_accounts, "Total Liabilities")

    @property
    def total_equity(self) -> TimeSeries[T]:
        return self._aggregate(self.equity_accounts, "Total Equity")

    @property
    def current_assets(self) -> TimeSeries[T]:
        accounts = [a for a in self.asset_accounts if classify.is_current_asset(a)]
        return self._aggregate(accounts, "Current Assets")

    @property
    def current_liabilities(self) -> TimeSeries[T]:
        accounts = [a for a in self.liability_accounts if classify.is_current_liability(a)]
        return self._aggregate(accounts, "Current Liabilities")

    @property
    def non_current_assets(self) -> TimeSeries[T]:
        accounts = [a for a in self.asset_accounts if classify.is_non_current_asset(a)]
        return self._aggregate(accounts, "Non-Current Assets")

    @property
    def non_current_liabilities(self) -> TimeSeries[T]:
        accounts = [a for a in self.liability_accounts if classify.is_non_current_liability(a)]
        return self._aggregate(accounts, "Non-Current Liabilities")

    @property
    def working_capital(self) -> TimeSeries[T]:
        return self.current_assets - self.current_liabilities

    @property
    def cash_and_equivalents(self) -> TimeSeries[T]:
        accounts = [a for a in self.asset_accounts if classify.is_cash(a)]
        return self._aggregate(accounts, "Cash and Equivalents")

    @property
    def inventory(self) -> TimeSeries[T]:
        accounts = [a for a in self.asset_accounts if classify.is_inventory(a)]
        return self._aggregate(accounts, "Inventory")

    @property
    def interest_bearing_debt(self) -> TimeSeries[T]:
        accounts = [a for a in self.liability_accounts if classify.is_debt(a)]
        return self._aggregate(accounts, "Interest-Bearing Debt")

    @property
    def net_debt(self) -> TimeSeries[T]:
        return self.interest_bearing_debt - self.cash_and_equivalents

    # ---- ratios ----

    @property
    def current_ratio(self) -> TimeSeries[T]:
        return self.current_assets / self.current_liabilities

    @property
    def quick_ratio(self) -> TimeSeries[T]:
        """(current assets - inventory) / current liabilities; no inventory reads as zero."""
        current_assets = self.current_assets
        accounts = [a for a in self.asset_accounts if classify.is_inventory(a)]
        if accounts:
            inventory = self._aggregate(accounts, "Inventory")
        else:
            inventory = self._zeros_over(current_assets)
        return (current_assets - inventory) / self.current_liabilities

    @property
    def cash_ratio(self) -> TimeSeries[T]:
        """cash / current liabilities; no cash account reads as zero."""
        accounts = [a for a in self.asset_accounts if classify.is_cash(a)]
        if accounts:
            cash = self._aggregate(accounts, "Cash and Equivalents")
        else:
            cash = self._zeros_over(self.current_assets)
        return cash / self.current_liabilities

    @property
    def debt_to_equity(self) -> TimeSeries[T]:
        return self.total_liabilities / self.total_equity

    @property
    def equity_ratio(self) -> TimeSeries[T]:
        return self.total_equity / self.total_assets

    @property
    def debt_ratio(self) -> TimeSeries[T]:
        return self.total_liabilities / self.total_assets

    # ---- validation ----

    def validate(self, tolerance: Any) -> None:
        """
        Check assets == liabilities + equity within `tolerance` per declared period.

        Periods missing from any of the three totals are skipped. Raises
        AccountingEquationViolation for the first offending period.
        """
        tolerance = coerce(tolerance, self.value_type)
        assets = self.total_assets
        liabilities = self.total_liabilities
        equity = self.total_equity

        checked = 0
        for period in self.periods:
            asset_value = assets[period]
            liability_value = liabilities[period]
            equity_value = equity[period]
            if asset_value is None or liability_value is None or equity_value is None:
                continue

            liabilities_and_equity = liability_value + equity_value
            if abs(asset_value - liabilities_and_equity) > tolerance:
                raise AccountingEquationViolation(
                    period=period,
                    assets=asset_value,
                    liabilities_and_equity=liabilities_and_equity,
                )
            checked += 1

        logger.debug(
            "Balance sheet validated",
            extra={"entity": self.entity.id, "periods_checked": checked, "tolerance": tolerance},
        )

    def materialize(self) -> BalanceSheetSnapshot[T]:
        return BalanceSheetSnapshot(
            total_assets=self.total_assets,
            total_liabilities=self.total_liabilities,
            total_equity=self.total_equity,
            current_assets=self.current_assets,
            current_liabilities=self.current_liabilities,
            non_current_assets=self.non_current_assets,
            non_current_liabilities=self.non_current_liabilities,
            working_capital=self.working_capital,
            cash_and_equivalents=self.cash_and_equivalents,
            interest_bearing_debt=self.interest_bearing_debt,
            net_debt=self.net_debt,
            current_ratio=self.current_ratio,
            quick_ratio=self.quick_ratio,
            cash_ratio=self.cash_ratio,
            debt_to_equity=self.debt_to_equity,
            equity_ratio=self.equity_ratio,
            debt_ratio=self.debt_ratio,
        )

    # ---- keyed encoding ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity.to_dict(),
            "periods": [p.to_dict() for p in self.periods],
            "asset_accounts": [a.to_dict() for a in self.asset_accounts],
            "liability_accounts": [a.to_dict() for a in self.liability_accounts],
            "equity_accounts": [a.to_dict() for a in self.equity_accounts],
            "aggregation_policy": self.aggregation_policy.value if self.aggregation_policy else None,
            "numeric_type": numeric_type_name(self.numeric_type) if self.numeric_type else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], numeric_type: Optional[type] = None) -> BalanceSheet:
        """Decode and re-run the constructor checks."""
        declared = data.get("numeric_type")
        numeric_type = numeric_type or (resolve_numeric_type(declared) if declared else None)
        account_type = numeric_type or float
        policy = data.get("aggregation_policy")
        return cls(
            entity=Entity.from_dict(data["entity"]),
            periods=tuple(Period.from_dict(p) for p in data["periods"]),
            asset_accounts=tuple(Account.from_dict(a, account_type) for a in data["asset_accounts"]),
            liability_accounts=tuple(Account.from_dict(a, account_type) for a in data["liability_accounts"]),
            equity_accounts=tuple(Account.from_dict(a, account_type) for a in data["equity_accounts"]),
            aggregation_policy=AggregationPolicy(policy) if policy else None,
            numeric_type=numeric_type,
        )
