from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional


def settlement_total(amounts: Any, include_vacation: bool, include_bonus: bool) -> Decimal:
    """Last month + compensation, plus vacation and bonus when included.

    Works on anything carrying the four amount fields (a calculation or a stored row).
    """
    total = amounts.last_month_payment + amounts.compensation_amount
    if include_vacation:
        total += amounts.proportional_vacation
    if include_bonus:
        total += amounts.proportional_bonus
    return total


@dataclass(frozen=True)
class LiquidationCalculation:
    """Result of the severance algorithm for one employee, before persistence."""

    worked_days: int
    worked_months: int
    days_to_pay_in_last_month: int
    base_salary: Decimal
    daily_salary: Decimal
    last_month_payment: Decimal
    proportional_vacation: Decimal
    proportional_bonus: Decimal
    compensation_amount: Decimal
    include_vacation: bool
    include_bonus: bool
    total_amount: Decimal

    def total_for(self, include_vacation: bool, include_bonus: bool) -> Decimal:
        return settlement_total(self, include_vacation, include_bonus)


@dataclass(frozen=True)
class Liquidation:
    """Persisted final settlement of a terminated employee.

    Immutable once ``is_paid`` is set. Rows replaced by a newer version keep
    ``is_superseded = True`` and stay for audit.
    """

    employee_id: int
    termination_date: date
    worked_days: int
    worked_months: int
    days_to_pay_in_last_month: int
    base_salary: Decimal
    last_month_payment: Decimal
    proportional_vacation: Decimal
    proportional_bonus: Decimal
    compensation_amount: Decimal
    total_amount: Decimal
    include_vacation: bool = True
    include_bonus: bool = True
    is_paid: bool = False
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    version: int = 1
    previous_version_id: Optional[int] = None
    is_superseded: bool = False
    liquidation_id: Optional[int] = None

    def total_for(self, include_vacation: bool, include_bonus: bool) -> Decimal:
        return settlement_total(self, include_vacation, include_bonus)


@dataclass(frozen=True)
class LiquidationPayment:
    liquidation_id: int
    employee_id: int
    amount: Decimal
    payment_date: date
    concept: str
    notes: Optional[str] = None
    payment_id: Optional[int] = None


@dataclass
class GenerationSummary:
    generated: int = 0
    updated: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def total_processed(self) -> int:
        return self.generated + self.updated + self.skipped


def amounts_of(calc: LiquidationCalculation) -> dict:
    """Calculation fields copied onto a Liquidation row (identity and payment state excluded)."""
    return {
        "worked_days": calc.worked_days,
        "worked_months": calc.worked_months,
        "days_to_pay_in_last_month": calc.days_to_pay_in_last_month,
        "base_salary": calc.base_salary,
        "last_month_payment": calc.last_month_payment,
        "proportional_vacation": calc.proportional_vacation,
        "proportional_bonus": calc.proportional_bonus,
        "compensation_amount": calc.compensation_amount,
    }

