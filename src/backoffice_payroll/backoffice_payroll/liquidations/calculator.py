from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

from ..common.money import ZERO, to_decimal
from ..common.validators import require_non_negative
from ..core.constants import LIQUIDATION_DAYS_PER_MONTH, MIN_WORKED_DAYS_FOR_BENEFITS
from ..core.exceptions import ValidationError
from .model import LiquidationCalculation

MONTHS_PER_YEAR = 12


class LiquidationCalculator:
    """Severance settlement from hire date, termination date and monthly salary.

    Months are counted as blocks of 30 days, not calendar months, so a
    tenure crossing February counts the same days as any other.
    """

    def compute(self, hire_date: date, termination_date: date, monthly_salary: Decimal) -> LiquidationCalculation:
        if hire_date is None or termination_date is None:
            raise ValidationError("invalid employment dates")
        if termination_date < hire_date:
            raise ValidationError(
                "invalid employment dates",
                [f"termination_date {termination_date.isoformat()} is before hire_date {hire_date.isoformat()}"],
            )
        monthly = require_non_negative(to_decimal(monthly_salary), "monthly_salary")

        worked_days = (termination_date - hire_date).days
        worked_months = worked_days // LIQUIDATION_DAYS_PER_MONTH
        days_in_last_month = termination_date.day

        daily = monthly / LIQUIDATION_DAYS_PER_MONTH
        last_month_payment = daily * days_in_last_month

        proportional_vacation = (worked_months % MONTHS_PER_YEAR) * daily

        year_start = date(termination_date.year, 1, 1)
        if hire_date > year_start:
            months_in_year = worked_months
        else:
            months_in_year = (termination_date - year_start).days // LIQUIDATION_DAYS_PER_MONTH
        proportional_bonus = monthly / MONTHS_PER_YEAR * (months_in_year % MONTHS_PER_YEAR)

        include_benefits = worked_days >= MIN_WORKED_DAYS_FOR_BENEFITS

        years_worked = worked_months // MONTHS_PER_YEAR
        compensation = monthly * years_worked if years_worked > 0 else ZERO

        partial = LiquidationCalculation(
            worked_days=worked_days,
            worked_months=worked_months,
            days_to_pay_in_last_month=days_in_last_month,
            base_salary=monthly,
            daily_salary=daily,
            last_month_payment=last_month_payment,
            proportional_vacation=proportional_vacation,
            proportional_bonus=proportional_bonus,
            compensation_amount=compensation,
            include_vacation=include_benefits,
            include_bonus=include_benefits,
            total_amount=ZERO,
        )
        return apply_inclusions(partial, include_benefits, include_benefits)


def apply_inclusions(calc: LiquidationCalculation, include_vacation: bool, include_bonus: bool) -> LiquidationCalculation:
    """Same amounts with caller-chosen inclusion flags and the matching total."""
    return replace(
        calc,
        include_vacation=include_vacation,
        include_bonus=include_bonus,
        total_amount=calc.total_for(include_vacation, include_bonus),
    )
