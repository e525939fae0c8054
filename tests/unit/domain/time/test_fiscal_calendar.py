# tests/unit/domain/time/test_fiscal_calendar.py

from datetime import date, datetime

import pytest

from finstat.domain.time.fiscal_calendar import (
    add_months,
    month_end,
    quarter_end,
    quarter_of,
    quarter_start,
    require_plain_date,
)


def test_require_plain_date_rejects_datetime_and_strings():
    require_plain_date(date(2024, 1, 1))

    with pytest.raises(TypeError, match="start_date"):
        require_plain_date(datetime(2024, 1, 1), "start_date")
    with pytest.raises(TypeError):
        require_plain_date("2024-01-01")


@pytest.mark.parametrize(
    "year, month, expected",
    [(2024, 2, 29), (2023, 2, 28), (2024, 4, 30), (2024, 12, 31)],
)
def test_month_end(year, month, expected):
    assert month_end(year, month) == date(year, month, expected)


def test_quarter_bounds():
    assert quarter_start(2024, 3) == date(2024, 7, 1)
    assert quarter_end(2024, 3) == date(2024, 9, 30)
    assert quarter_of(date(2024, 11, 15)) == 4


@pytest.mark.parametrize(
    "start, shift, expected",
    [((2024, 11), 2, (2025, 1)), ((2024, 1), -1, (2023, 12)), ((2024, 6), 0, (2024, 6))],
)
def test_add_months(start, shift, expected):
    assert add_months(*start, shift) == expected
