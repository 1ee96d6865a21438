from datetime import date

import pytest

from src.backoffice_payroll.backoffice_payroll.common.datetime_utils import month_bounds, parse_period
from src.backoffice_payroll.backoffice_payroll.core.exceptions import ValidationError


def test_parse_period():
    assert parse_period("2024-03") == (3, 2024)


@pytest.mark.parametrize("value", ["2024-13", "2024-3", "03-2024", ""])
def test_parse_period_rejects_bad_values(value):
    with pytest.raises(ValidationError):
        parse_period(value)


def test_month_bounds_handles_leap_february():
    assert month_bounds(2, 2024) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(12, 2023) == (date(2023, 12, 1), date(2023, 12, 31))
