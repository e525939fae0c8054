# tests/unit/use_cases/test_build_multi_period_report_use_case.py

import dataclasses
from decimal import Decimal
from unittest.mock import Mock

import pytest

import finstat.use_cases.build_multi_period_report_use_case as use_case_module
from finstat.domain.errors import AccountingEquationViolation
from finstat.domain.services.account_aggregator import AggregationPolicy
from finstat.entities.account import Account, AccountType
from finstat.entities.balance_sheet import BalanceSheet
from finstat.entities.entity import Entity
from finstat.entities.income_statement import IncomeStatement
from finstat.entities.period import Period
from finstat.entities.time_series import TimeSeries
from finstat.use_cases.build_multi_period_report_use_case import BuildMultiPeriodReportUseCase
from finstat.utils.config_loader import AnalysisConfig

ACME = Entity("ACME")
Q1, Q2 = Period.quarter(2024, 1), Period.quarter(2024, 2)


def _config(policy=AggregationPolicy.INTERSECTION, tolerance=0.01) -> AnalysisConfig:
    return AnalysisConfig(
        balance_tolerance=tolerance,
        aggregation_policy=policy,
        numeric_type=float,
        log_level="INFO",
    )


def _account(name, account_type, values) -> Account:
    return Account(ACME, name, account_type, TimeSeries.from_mapping(values))


def _income(period, revenue, extra_revenue=None) -> IncomeStatement:
    revenues = [_account("Sales", AccountType.REVENUE, {period: revenue})]
    if extra_revenue is not None:
        revenues.append(_account("Services", AccountType.REVENUE, extra_revenue))
    return IncomeStatement(entity=ACME, periods=(period,), revenue_accounts=tuple(revenues))


def _balance(period, assets, liabilities, equity) -> BalanceSheet:
    return BalanceSheet(
        entity=ACME,
        periods=(period,),
        asset_accounts=(_account("Cash", AccountType.ASSET, {period: assets}),),
        liability_accounts=(_account("Payables", AccountType.LIABILITY, {period: liabilities}),),
        equity_accounts=(_account("Stock", AccountType.EQUITY, {period: equity}),),
    )


def test_builds_report_from_valid_statements():
    # Arrange
    use_case = BuildMultiPeriodReportUseCase(config=_config())

    # Act
    result = use_case.execute(
        entity=ACME,
        periods=[Q1, Q2],
        income_statements=[_income(Q1, 100.0), _income(Q2, 120.0)],
        balance_sheets=[_balance(Q1, 50.0, 20.0, 30.0), _balance(Q2, 60.0, 20.0, 40.0)],
    )

    # Assert
    assert result.validated_balance_sheets == 2
    assert result.tolerance == 0.01
    assert result.aggregation_policy is AggregationPolicy.INTERSECTION
    assert result.report.period_count == 2
    assert result.report.revenue_growth() == pytest.approx([0.2])


def test_violation_stops_before_report_is_built(monkeypatch):
    create = Mock()
    monkeypatch.setattr(use_case_module.MultiPeriodReport, "create", create)
    use_case = BuildMultiPeriodReportUseCase(config=_config())

    with pytest.raises(AccountingEquationViolation) as exc:
        use_case.execute(
            entity=ACME,
            periods=[Q1],
            income_statements=[_income(Q1, 100.0)],
            balance_sheets=[_balance(Q1, 50.0, 20.0, 20.0)],
        )

    assert exc.value.period == Q1
    create.assert_not_called()


def test_explicit_tolerance_overrides_config():
    use_case = BuildMultiPeriodReportUseCase(config=_config(tolerance=0.0))

    result = use_case.execute(
        entity=ACME,
        periods=[Q1],
        income_statements=[_income(Q1, 100.0)],
        balance_sheets=[_balance(Q1, 50.0, 20.0, 29.5)],
        tolerance=1.0,
    )

    assert result.tolerance == 1.0


def test_configured_policy_applies_to_statements_without_one():
    use_case = BuildMultiPeriodReportUseCase(config=_config(policy=AggregationPolicy.UNION_ZERO_FILL))
    # "Services" only reports in Q2; union keeps Sales for Q1
    income = _income(Q1, 100.0, extra_revenue={Q2: 5.0})

    result = use_case.execute(
        entity=ACME,
        periods=[Q1],
        income_statements=[income],
        balance_sheets=[_balance(Q1, 50.0, 20.0, 30.0)],
    )

    assert result.aggregation_policy is AggregationPolicy.UNION_ZERO_FILL
    assert result.report[0].revenue == 100.0


def test_statement_policy_is_kept_when_set(monkeypatch):
    create = Mock()
    monkeypatch.setattr(use_case_module.MultiPeriodReport, "create", create)
    use_case = BuildMultiPeriodReportUseCase(config=_config(policy=AggregationPolicy.UNION_ZERO_FILL))
    income = IncomeStatement(
        entity=ACME,
        periods=(Q1,),
        revenue_accounts=(_account("Sales", AccountType.REVENUE, {Q1: 1.0}),),
        aggregation_policy=AggregationPolicy.INTERSECTION,
    )

    use_case.execute(
        entity=ACME,
        periods=[Q1],
        income_statements=[income],
        balance_sheets=[_balance(Q1, 1.0, 0.0, 1.0)],
    )

    passed = create.call_args.kwargs
    assert passed["income_statements"][0].aggregation_policy is AggregationPolicy.INTERSECTION
    assert passed["balance_sheets"][0].aggregation_policy is AggregationPolicy.UNION_ZERO_FILL


def test_decimal_statements_get_decimal_tolerance():
    use_case = BuildMultiPeriodReportUseCase(config=_config())
    balance = _balance(Q1, Decimal("50.00"), Decimal("20.00"), Decimal("30.00"))
    income = IncomeStatement(
        entity=ACME,
        periods=(Q1,),
        revenue_accounts=(_account("Sales", AccountType.REVENUE, {Q1: Decimal("100")}),),
    )

    result = use_case.execute(entity=ACME, periods=[Q1], income_statements=[income], balance_sheets=[balance])

    assert result.tolerance == Decimal("0.01")
    assert result.report[0].numeric_type is Decimal


def test_config_is_loaded_when_not_given(monkeypatch):
    loader = Mock(return_value=_config(policy=AggregationPolicy.UNION_ZERO_FILL))
    monkeypatch.setattr(use_case_module, "load_analysis_config", loader)

    use_case = BuildMultiPeriodReportUseCase()

    loader.assert_called_once_with()
    assert use_case.config.aggregation_policy is AggregationPolicy.UNION_ZERO_FILL


def test_configured_numeric_type_applies_when_no_statement_has_accounts():
    use_case = BuildMultiPeriodReportUseCase(config=dataclasses.replace(_config(), numeric_type=Decimal))

    result = use_case.execute(
        entity=ACME,
        periods=[Q1],
        income_statements=[IncomeStatement(entity=ACME, periods=(Q1,))],
        balance_sheets=[BalanceSheet(entity=ACME, periods=(Q1,))],
    )

    assert result.numeric_type is Decimal
    assert result.tolerance == Decimal("0.01")
    assert result.report[0].revenue == Decimal("0")
    assert isinstance(result.report[0].total_assets, Decimal)


def test_empty_statement_follows_decimal_siblings_over_config():
    use_case = BuildMultiPeriodReportUseCase(config=_config())
    balance = _balance(Q1, Decimal("100"), Decimal("40"), Decimal("60"))

    result = use_case.execute(
        entity=ACME,
        periods=[Q1],
        income_statements=[IncomeStatement(entity=ACME, periods=(Q1,))],
        balance_sheets=[balance],
    )

    assert result.numeric_type is Decimal
    assert result.report[0].roa == Decimal("0")


def test_from_config_file_sets_up_logging_at_configured_level(monkeypatch):
    config = dataclasses.replace(_config(), log_level="DEBUG")
    loader = Mock(return_value=config)
    setup = Mock()
    monkeypatch.setattr(use_case_module, "load_analysis_config", loader)
    monkeypatch.setattr(use_case_module, "setup_logging", setup)

    use_case = BuildMultiPeriodReportUseCase.from_config_file("analysis.yaml")

    loader.assert_called_once_with("analysis.yaml")
    setup.assert_called_once_with("DEBUG")
    assert use_case.config is config
