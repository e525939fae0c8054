# tests/unit/entities/test_income_statement.py

import pytest

from finstat.domain.errors import EntityMismatchError, InvalidAccountTypeError
from finstat.entities.account import Account, AccountMetadata, AccountType
from finstat.entities.entity import Entity
from finstat.entities.income_statement import IncomeStatement
from finstat.entities.period import Period
from finstat.entities.roles import IncomeStatementRole
from finstat.entities.time_series import TimeSeries

ACME = Entity("ACME")
Q1, Q2 = Period.quarter(2024, 1), Period.quarter(2024, 2)


def _line(name, account_type, values, role=None, metadata=None, entity=ACME) -> Account:
    return Account(
        entity=entity,
        name=name,
        type=account_type,
        time_series=TimeSeries.from_mapping(values),
        metadata=metadata,
        income_statement_role=role,
    )


def _expense(name, values, role=None, metadata=None) -> Account:
    return _line(name, AccountType.EXPENSE, values, role, metadata)


def _statement() -> IncomeStatement:
    return IncomeStatement(
        entity=ACME,
        periods=(Q1, Q2),
        revenue_accounts=(
            _line("Product Sales", AccountType.REVENUE, {Q1: 1000.0, Q2: 1200.0}, IncomeStatementRole.REVENUE),
        ),
        expense_accounts=(
            _expense("Cost of Sales", {Q1: 400.0, Q2: 480.0}, IncomeStatementRole.COST_OF_REVENUE),
            _expense("SG&A", {Q1: 200.0, Q2: 220.0}, IncomeStatementRole.OPERATING_EXPENSE),
            _expense("Depreciation", {Q1: 50.0, Q2: 50.0}, IncomeStatementRole.DEPRECIATION_AMORTIZATION),
            _expense("Interest", {Q1: 30.0, Q2: 30.0}, IncomeStatementRole.INTEREST_EXPENSE),
            _expense("Income Tax", {Q1: 60.0, Q2: 80.0}, IncomeStatementRole.INCOME_TAX),
        ),
    )


class TestIncomeStatement:
    """
    Unit tests for IncomeStatement.

    Focus:
    - profit waterfall (gross, operating, EBITDA, net)
    - role-first expense classification with legacy fallback
    - margins under the zero-revenue rule
    """

    def test_revenue_section_rejects_expense_accounts(self):
        with pytest.raises(InvalidAccountTypeError):
            IncomeStatement(
                entity=ACME,
                periods=(Q1,),
                revenue_accounts=(_expense("Rent", {Q1: 1.0}),),
            )

    def test_foreign_entity_account_raises(self):
        foreign = _line("Sales", AccountType.REVENUE, {Q1: 1.0}, entity=Entity("OTHER"))

        with pytest.raises(EntityMismatchError, match="IncomeStatement"):
            IncomeStatement(entity=ACME, periods=(Q1,), revenue_accounts=(foreign,))

    def test_profit_waterfall(self):
        statement = _statement()

        assert statement.total_revenue.values_list == [1000.0, 1200.0]
        assert statement.total_expenses.values_list == [740.0, 860.0]
        assert statement.cost_of_revenue.values_list == [400.0, 480.0]
        assert statement.gross_profit.values_list == [600.0, 720.0]
        assert statement.operating_expenses.values_list == [250.0, 270.0]
        assert statement.operating_income.values_list == [350.0, 450.0]
        assert statement.ebitda.values_list == [400.0, 500.0]
        assert statement.interest_expense.values_list == [30.0, 30.0]
        assert statement.net_income.values_list == [260.0, 340.0]

    def test_margins(self):
        statement = _statement()

        assert statement.gross_margin.values_list == pytest.approx([0.6, 0.6])
        assert statement.operating_margin.values_list == pytest.approx([0.35, 0.375])
        assert statement.net_margin.values_list == pytest.approx([0.26, 340.0 / 1200.0])
        assert statement.ebitda_margin.values_list == pytest.approx([0.4, 500.0 / 1200.0])

    def test_zero_revenue_period_has_no_margin(self):
        statement = IncomeStatement(
            entity=ACME,
            periods=(Q1, Q2),
            revenue_accounts=(_line("Sales", AccountType.REVENUE, {Q1: 0.0, Q2: 100.0}),),
            expense_accounts=(_expense("Rent", {Q1: 10.0, Q2: 10.0}, IncomeStatementRole.OPERATING_EXPENSE),),
        )

        margin = statement.net_margin

        assert margin.periods == (Q2,)
        assert margin[Q2] == pytest.approx(0.9)

    def test_no_expenses_means_zero_expense_series(self):
        statement = IncomeStatement(
            entity=ACME,
            periods=(Q1,),
            revenue_accounts=(_line("Sales", AccountType.REVENUE, {Q1: 100.0}),),
        )

        assert statement.total_expenses[Q1] == 0.0
        assert statement.net_income[Q1] == 100.0
        assert not statement.has_interest_expense
        assert not statement.has_cost_of_revenue

    def test_legacy_expense_classification(self):
        statement = IncomeStatement(
            entity=ACME,
            periods=(Q1,),
            revenue_accounts=(_line("Sales", AccountType.REVENUE, {Q1: 500.0}),),
            expense_accounts=(
                _expense("Materials", {Q1: 200.0}, metadata=AccountMetadata(category="COGS")),
                _expense("Salaries", {Q1: 100.0}, metadata=AccountMetadata(category="Operating")),
                _expense(
                    "Amortization",
                    {Q1: 20.0},
                    metadata=AccountMetadata(category="Operating", tags=("D&A",)),
                ),
                _expense("Interest on Loans", {Q1: 10.0}),
            ),
        )

        assert statement.cost_of_revenue[Q1] == 200.0
        assert statement.operating_expenses[Q1] == 120.0
        assert statement.depreciation_amortization[Q1] == 20.0
        assert statement.operating_income[Q1] == 180.0
        assert statement.ebitda[Q1] == 200.0
        assert statement.has_interest_expense
        assert statement.interest_expense[Q1] == 10.0

    def test_role_overrides_legacy_category(self):
        account = _expense(
            "Freight",
            {Q1: 40.0},
            IncomeStatementRole.OPERATING_EXPENSE,
            metadata=AccountMetadata(category="COGS"),
        )
        statement = IncomeStatement(
            entity=ACME,
            periods=(Q1,),
            revenue_accounts=(_line("Sales", AccountType.REVENUE, {Q1: 100.0}),),
            expense_accounts=(account,),
        )

        assert statement.cost_of_revenue[Q1] == 0.0
        assert statement.operating_expenses[Q1] == 40.0

    def test_materialize_and_encoding(self):
        statement = _statement()

        snapshot = statement.materialize()
        decoded = IncomeStatement.from_dict(statement.to_dict())

        assert snapshot.ebitda == statement.ebitda
        assert decoded == statement
        assert decoded.net_income == statement.net_income
