# finstat/domain/services/account_aggregator.py

from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Sequence

from finstat.domain.errors import EntityMismatchError, InvalidAccountTypeError
from finstat.entities.account import Account, AccountType
from finstat.entities.entity import Entity
from finstat.entities.period import Period
from finstat.entities.time_series import TimeSeries, TimeSeriesMetadata

logger = logging.getLogger(__name__)


class AggregationPolicy(Enum):
    """
    How account series with different period coverage are summed.

    INTERSECTION keeps only periods every account defines (a new account
    added mid-series shrinks the total). UNION_ZERO_FILL keeps every period
    any account defines, a missing value counting as zero.
    """

    INTERSECTION = "intersection"
    UNION_ZERO_FILL = "union_zero_fill"


def require_entity(statement: str, entity: Entity, accounts: Iterable[Account]) -> None:
    for account in accounts:
        if account.entity != entity:
            raise EntityMismatchError(
                statement=statement,
                expected=entity.id,
                actual=account.entity.id,
                account=account.name,
            )


def require_account_type(expected: AccountType, accounts: Iterable[Account]) -> None:
    for account in accounts:
        if account.type is not expected:
            raise InvalidAccountTypeError(
                expected=expected,
                actual=account.type,
                account=account.name,
            )


def infer_numeric_type(accounts: Iterable[Account], default: type = float) -> type:
    for account in accounts:
        numeric_type = account.time_series.numeric_type
        if numeric_type is Decimal:
            return Decimal
        if numeric_type is not None:
            return float
    return default


class AccountAggregator:
    """
    Domain service summing account series into statement totals.

    - No accounts: a zero-filled series over the statement's declared periods
    - Otherwise: a fold over the account series under the chosen policy
    """

    def __init__(
        self,
        periods: Sequence[Period],
        policy: AggregationPolicy = AggregationPolicy.INTERSECTION,
        numeric_type: type = float,
    ) -> None:
        self.periods = tuple(periods)
        self.policy = policy
        self.numeric_type = numeric_type

    def aggregate(self, accounts: Sequence[Account], name: Optional[str] = None) -> TimeSeries:
        metadata = TimeSeriesMetadata(name=name or "")
        if not accounts:
            return TimeSeries.zeros(self.periods, self.numeric_type, metadata)

        total = accounts[0].time_series
        if self.policy is AggregationPolicy.UNION_ZERO_FILL:
            for account in accounts[1:]:
                total = total.union_add(account.time_series, self.numeric_type)
            return total.with_metadata(metadata)

        covered: set[Period] = set(total.periods)
        for account in accounts[1:]:
            covered |= set(account.time_series.periods)
            total = total + account.time_series

        dropped = covered - set(total.periods)
        if dropped:
            logger.warning(
                "Aggregation dropped periods not covered by every account",
                extra={
                    "total": name or "unnamed",
                    "dropped_periods": ",".join(p.label for p in sorted(dropped)),
                    "accounts": len(accounts),
                },
            )
        return total.with_metadata(metadata)
