# tests/unit/entities/test_balance_sheet.py

from decimal import Decimal

import pytest

from finstat.domain.errors import (
    AccountingEquationViolation,
    EntityMismatchError,
    InvalidAccountTypeError,
)
from finstat.domain.services.account_aggregator import AggregationPolicy
from finstat.entities.account import Account, AccountMetadata, AccountType
from finstat.entities.balance_sheet import BalanceSheet
from finstat.entities.entity import Entity
from finstat.entities.period import Period
from finstat.entities.roles import BalanceSheetRole
from finstat.entities.time_series import TimeSeries

ACME = Entity("ACME")
OTHER = Entity("OTHER")
Q1, Q2 = Period.quarter(2024, 1), Period.quarter(2024, 2)


def _account(name, account_type, values, role=None, entity=ACME, metadata=None) -> Account:
    return Account(
        entity=entity,
        name=name,
        type=account_type,
        time_series=TimeSeries.from_mapping(values),
        metadata=metadata,
        balance_sheet_role=role,
    )


def _asset(name, values, role=None, **kwargs) -> Account:
    return _account(name, AccountType.ASSET, values, role, **kwargs)


def _liability(name, values, role=None, **kwargs) -> Account:
    return _account(name, AccountType.LIABILITY, values, role, **kwargs)


def _equity(name, values, role=None, **kwargs) -> Account:
    return _account(name, AccountType.EQUITY, values, role, **kwargs)


def _balance_sheet(equity_q1: float = 300.0, **kwargs) -> BalanceSheet:
    return BalanceSheet(
        entity=ACME,
        periods=(Q1, Q2),
        asset_accounts=(
            _asset("Cash", {Q1: 100.0, Q2: 120.0}, BalanceSheetRole.CASH_AND_EQUIVALENTS),
            _asset("Inventory", {Q1: 50.0, Q2: 60.0}, BalanceSheetRole.INVENTORY),
            _asset("PP&E", {Q1: 350.0, Q2: 320.0}, BalanceSheetRole.PROPERTY_PLANT_EQUIPMENT),
        ),
        liability_accounts=(
            _liability("Accounts Payable", {Q1: 80.0, Q2: 100.0}, BalanceSheetRole.ACCOUNTS_PAYABLE),
            _liability("Term Loan", {Q1: 120.0, Q2: 100.0}, BalanceSheetRole.LONG_TERM_DEBT),
        ),
        equity_accounts=(
            _equity("Common Stock", {Q1: equity_q1, Q2: 300.0}, BalanceSheetRole.COMMON_STOCK),
        ),
        **kwargs,
    )


class TestBalanceSheetConstruction:
    """
    Focus:
    - entity consistency
    - account type per section
    - inferred numeric type and default policy
    """

    def test_account_from_other_entity_raises(self):
        with pytest.raises(EntityMismatchError) as exc:
            BalanceSheet(
                entity=ACME,
                periods=(Q1,),
                asset_accounts=(_asset("Cash", {Q1: 1.0}, entity=OTHER),),
            )

        assert exc.value.expected == "ACME"
        assert exc.value.actual == "OTHER"
        assert exc.value.account == "Cash"

    def test_liability_in_asset_section_raises(self):
        with pytest.raises(InvalidAccountTypeError, match="expected asset, got liability"):
            BalanceSheet(
                entity=ACME,
                periods=(Q1,),
                asset_accounts=(_liability("Loan", {Q1: 1.0}),),
            )

    def test_equity_section_requires_equity_accounts(self):
        with pytest.raises(InvalidAccountTypeError):
            BalanceSheet(
                entity=ACME,
                periods=(Q1,),
                equity_accounts=(_asset("Cash", {Q1: 1.0}),),
            )

    def test_defaults(self):
        sheet = _balance_sheet()

        assert sheet.policy is AggregationPolicy.INTERSECTION
        assert sheet.numeric_type is float
        assert len(sheet.all_accounts) == 6

    def test_decimal_accounts_make_a_decimal_sheet(self):
        sheet = BalanceSheet(
            entity=ACME,
            periods=(Q1,),
            asset_accounts=(_asset("Cash", {Q1: Decimal("1.5")}),),
        )

        assert sheet.numeric_type is Decimal


class TestBalanceSheetTotals:
    def test_totals(self):
        sheet = _balance_sheet()

        assert sheet.total_assets.values_list == [500.0, 500.0]
        assert sheet.total_liabilities.values_list == [200.0, 200.0]
        assert sheet.total_equity.values_list == [300.0, 300.0]

    def test_current_and_non_current_split_by_role(self):
        sheet = _balance_sheet()

        assert sheet.current_assets.values_list == [150.0, 180.0]
        assert sheet.non_current_assets.values_list == [350.0, 320.0]
        assert sheet.current_liabilities.values_list == [80.0, 100.0]
        assert sheet.non_current_liabilities.values_list == [120.0, 100.0]

    def test_working_capital_and_debt(self):
        sheet = _balance_sheet()

        assert sheet.working_capital.values_list == [70.0, 80.0]
        assert sheet.cash_and_equivalents.values_list == [100.0, 120.0]
        assert sheet.interest_bearing_debt.values_list == [120.0, 100.0]
        assert sheet.net_debt.values_list == [20.0, -20.0]

    def test_empty_sections_total_zero_over_declared_periods(self):
        sheet = BalanceSheet(entity=ACME, periods=(Q1, Q2))

        assert sheet.total_assets.items() == [(Q1, 0.0), (Q2, 0.0)]
        assert sheet.current_liabilities.items() == [(Q1, 0.0), (Q2, 0.0)]

    def test_role_takes_precedence_over_legacy_category(self):
        building = _asset(
            "Building",
            {Q1: 10.0},
            BalanceSheetRole.PROPERTY_PLANT_EQUIPMENT,
            metadata=AccountMetadata(category="Current"),
        )
        sheet = BalanceSheet(entity=ACME, periods=(Q1,), asset_accounts=(building,))

        assert sheet.current_assets[Q1] == 0.0
        assert sheet.non_current_assets[Q1] == 10.0

    def test_legacy_accounts_classified_by_category_and_name(self):
        current = AccountMetadata(category="Current")
        sheet = BalanceSheet(
            entity=ACME,
            periods=(Q1,),
            asset_accounts=(
                _asset("Cash and Cash Equivalents", {Q1: 40.0}, metadata=current),
                _asset("Merchandise Inventory", {Q1: 20.0}, metadata=current),
                _asset("Equipment", {Q1: 90.0}),
            ),
            liability_accounts=(
                _liability("Accounts Payable", {Q1: 30.0}, metadata=current),
                _liability("Senior Notes", {Q1: 50.0}, metadata=AccountMetadata(category="Long-Term")),
                _liability("Deferred Tax", {Q1: 5.0}, metadata=AccountMetadata(category="Long-Term")),
            ),
        )

        assert sheet.current_assets[Q1] == 60.0
        assert sheet.cash_and_equivalents[Q1] == 40.0
        assert sheet.inventory[Q1] == 20.0
        assert sheet.current_liabilities[Q1] == 30.0
        assert sheet.interest_bearing_debt[Q1] == 50.0

    def test_intersection_policy_drops_partial_periods(self):
        sheet = BalanceSheet(
            entity=ACME,
            periods=(Q1, Q2),
            asset_accounts=(
                _asset("Cash", {Q1: 10.0, Q2: 20.0}),
                _asset("Receivables", {Q2: 5.0}),
            ),
        )

        assert sheet.total_assets.items() == [(Q2, 25.0)]

    def test_union_policy_zero_fills_partial_periods(self):
        sheet = BalanceSheet(
            entity=ACME,
            periods=(Q1, Q2),
            asset_accounts=(
                _asset("Cash", {Q1: 10.0, Q2: 20.0}),
                _asset("Receivables", {Q2: 5.0}),
            ),
            aggregation_policy=AggregationPolicy.UNION_ZERO_FILL,
        )

        assert sheet.total_assets.items() == [(Q1, 10.0), (Q2, 25.0)]


class TestBalanceSheetRatios:
    def test_liquidity_ratios(self):
        sheet = _balance_sheet()

        assert sheet.current_ratio.values_list == pytest.approx([1.875, 1.8])
        assert sheet.quick_ratio.values_list == pytest.approx([1.25, 1.2])
        assert sheet.cash_ratio.values_list == pytest.approx([1.25, 1.2])

    def test_leverage_ratios(self):
        sheet = _balance_sheet()

        assert sheet.debt_to_equity[Q1] == pytest.approx(200.0 / 300.0)
        assert sheet.equity_ratio[Q1] == pytest.approx(0.6)
        assert sheet.debt_ratio[Q1] == pytest.approx(0.4)

    def test_quick_ratio_without_inventory_equals_current_ratio(self):
        sheet = BalanceSheet(
            entity=ACME,
            periods=(Q1,),
            asset_accounts=(_asset("Receivables", {Q1: 30.0}, BalanceSheetRole.ACCOUNTS_RECEIVABLE),),
            liability_accounts=(_liability("Payables", {Q1: 20.0}, BalanceSheetRole.ACCOUNTS_PAYABLE),),
        )

        assert sheet.quick_ratio[Q1] == sheet.current_ratio[Q1] == 1.5
        assert sheet.cash_ratio[Q1] == 0.0

    def test_zero_current_liabilities_omits_ratio_period(self):
        sheet = BalanceSheet(
            entity=ACME,
            periods=(Q1, Q2),
            asset_accounts=(_asset("Cash", {Q1: 10.0, Q2: 10.0}, BalanceSheetRole.CASH_AND_EQUIVALENTS),),
            liability_accounts=(_liability("Payables", {Q1: 0.0, Q2: 5.0}, BalanceSheetRole.ACCOUNTS_PAYABLE),),
        )

        ratio = sheet.current_ratio

        assert ratio[Q1] is None
        assert ratio[Q2] == 2.0

    def test_materialize_matches_properties(self):
        sheet = _balance_sheet()

        snapshot = sheet.materialize()

        assert snapshot.total_assets == sheet.total_assets
        assert snapshot.net_debt == sheet.net_debt
        assert snapshot.quick_ratio == sheet.quick_ratio


class TestBalanceSheetValidation:
    def test_balanced_sheet_passes(self):
        _balance_sheet().validate(0.01)

    def test_gap_within_tolerance_passes(self):
        _balance_sheet(equity_q1=299.995).validate(0.01)

    def test_violation_reports_period_and_totals(self):
        with pytest.raises(AccountingEquationViolation) as exc:
            _balance_sheet(equity_q1=290.0).validate(0.01)

        assert exc.value.period == Q1
        assert exc.value.assets == 500.0
        assert exc.value.liabilities_and_equity == 490.0
        assert "2024-Q1" in str(exc.value)

    def test_decimal_sheet_validates_exactly(self):
        sheet = BalanceSheet(
            entity=ACME,
            periods=(Q1,),
            asset_accounts=(_asset("Cash", {Q1: Decimal("0.3")}),),
            liability_accounts=(_liability("Payables", {Q1: Decimal("0.1")}),),
            equity_accounts=(_equity("Stock", {Q1: Decimal("0.2")}),),
        )

        sheet.validate(0)

    def test_periods_missing_from_a_total_are_skipped(self):
        sheet = BalanceSheet(
            entity=ACME,
            periods=(Q1, Q2),
            asset_accounts=(_asset("Cash", {Q1: 10.0, Q2: 999.0}),),
            liability_accounts=(_liability("Payables", {Q1: 4.0}),),
            equity_accounts=(_equity("Stock", {Q1: 6.0}),),
        )

        sheet.validate(0.01)


class TestBalanceSheetEncoding:
    def test_to_dict_from_dict_preserves_sheet(self):
        sheet = _balance_sheet(aggregation_policy=AggregationPolicy.UNION_ZERO_FILL)

        decoded = BalanceSheet.from_dict(sheet.to_dict())

        assert decoded == sheet
        assert decoded.policy is AggregationPolicy.UNION_ZERO_FILL
        assert decoded.total_assets == sheet.total_assets

    def test_from_dict_reruns_entity_check(self):
        data = _balance_sheet().to_dict()
        data["asset_accounts"][0]["entity"]["id"] = "OTHER"

        with pytest.raises(EntityMismatchError):
            BalanceSheet.from_dict(data)

    def test_from_dict_reruns_type_check(self):
        data = _balance_sheet().to_dict()
        data["asset_accounts"][0]["type"] = "liability"

        with pytest.raises(InvalidAccountTypeError):
            BalanceSheet.from_dict(data)
