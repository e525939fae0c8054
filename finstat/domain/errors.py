# finstat/domain/errors.py

from __future__ import annotations

from typing import Any


class FinancialStatementError(ValueError):
    """Base class for structural and business-rule failures of a statement."""


class EntityMismatchError(FinancialStatementError):
    def __init__(self, statement: str, expected: str, actual: str, account: str) -> None:
        self.statement = statement
        self.expected = expected
        self.actual = actual
        self.account = account
        super().__init__(
            f"{statement}: account '{account}' belongs to entity '{actual}', "
            f"expected '{expected}'"
        )


class InvalidAccountTypeError(FinancialStatementError):
    def __init__(self, expected: Any, actual: Any, account: str) -> None:
        self.expected = expected
        self.actual = actual
        self.account = account
        super().__init__(
            f"Invalid account type for '{account}': expected {expected.value}, "
            f"got {actual.value}"
        )


class AccountingEquationViolation(FinancialStatementError):
    """
    Assets != Liabilities + Equity beyond the tolerance for one period.

    Carries the offending period and both totals in the statement's
    numeric type so callers can report the exact gap.
    """

    def __init__(self, period: Any, assets: Any, liabilities_and_equity: Any) -> None:
        self.period = period
        self.assets = assets
        self.liabilities_and_equity = liabilities_and_equity
        super().__init__(
            f"Accounting equation violated for {period.label}: "
            f"assets={assets} liabilities_and_equity={liabilities_and_equity}"
        )


class MissingAccountError(FinancialStatementError):
    def __init__(self, account: str, statement: str) -> None:
        self.account = account
        self.statement = statement
        super().__init__(f"Required account '{account}' not found in {statement}")


class TimeSeriesLengthMismatchError(ValueError):
    def __init__(self, periods: int, values: int) -> None:
        self.periods = periods
        self.values = values
        super().__init__(
            f"periods and values must have the same length (got {periods} and {values})"
        )


class MultiPeriodReportError(ValueError):
    pass


class EmptyPeriodsError(MultiPeriodReportError):
    def __init__(self, message: str = "Multi-period report must contain at least one period summary") -> None:
        super().__init__(message)


class ReportEntityMismatchError(MultiPeriodReportError):
    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"All period summaries must belong to entity '{expected}' (found '{actual}')"
        )


class OperationalMetricsError(ValueError):
    pass


class ConfigError(ValueError):
    pass
