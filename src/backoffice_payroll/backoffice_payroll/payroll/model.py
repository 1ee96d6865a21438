from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..common.money import ZERO, money_sum
from ..core.enums import AdjustmentKind, PaymentChannel


@dataclass(frozen=True)
class SalaryAdjustment:
    """One deduction or addition line produced from an attendance day."""

    kind: AdjustmentKind
    concept: str
    amount: Decimal
    work_date: date
    notes: str = ""


@dataclass(frozen=True)
class AdjustmentGroup:
    total: Decimal
    details: tuple[SalaryAdjustment, ...] = ()

    @classmethod
    def of(cls, items: Sequence[SalaryAdjustment]) -> "AdjustmentGroup":
        return cls(total=money_sum(i.amount for i in items), details=tuple(items))


@dataclass(frozen=True)
class AttendanceBonus:
    amount: Decimal
    applied: bool


@dataclass(frozen=True)
class EmployeeSalary:
    """Salary fields of an employee, as needed by the calculators."""

    employee_id: int
    hand_salary: Decimal
    bank_salary: Decimal
    has_attendance_bonus: bool = False
    attendance_bonus_amount: Optional[Decimal] = None

    @property
    def base_salary(self) -> Decimal:
        return self.hand_salary + self.bank_salary


@dataclass(frozen=True)
class PayrollCalculation:
    hand_salary: Decimal
    bank_salary: Decimal
    base_salary: Decimal
    deductions: AdjustmentGroup
    additions: AdjustmentGroup
    adjusted_hand_salary: Decimal
    total_salary: Decimal
    attendance_bonus: Optional[AttendanceBonus] = None
    # Employee is entitled to the bonus, whether or not an amount was configured.
    has_attendance_bonus: bool = False

    @property
    def bonus_paid(self) -> Decimal:
        if self.attendance_bonus and self.attendance_bonus.applied:
            return self.attendance_bonus.amount
        return ZERO


@dataclass(frozen=True)
class PayrollValidation:
    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class LatestPayrollSalary:
    """Fallback salary source: the most recent payroll row of an employee."""

    base_salary: Decimal
    bank_salary: Decimal


@dataclass(frozen=True)
class Payroll:
    """Persisted payroll row for one employee and one month.

    ``is_paid`` is derived from the two channel flags and is never stored by the app.
    """

    employee_id: int
    month: int
    year: int
    hand_salary: Decimal
    bank_salary: Decimal
    base_salary: Decimal
    deductions_total: Decimal
    additions_total: Decimal
    adjusted_hand_salary: Decimal
    total_salary: Decimal
    has_attendance_bonus: bool = False
    attendance_bonus: Decimal = ZERO
    details: tuple[SalaryAdjustment, ...] = ()
    is_paid_hand: bool = False
    is_paid_bank: bool = False
    hand_payment_date: Optional[date] = None
    bank_payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    payroll_id: Optional[int] = None
    notes: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.is_paid_hand and self.is_paid_bank

    @property
    def hand_amount(self) -> Decimal:
        """Part of the total paid in hand: adjusted hand salary plus any bonus."""
        return self.total_salary - self.bank_salary


@dataclass(frozen=True)
class PayrollPayment:
    """One confirmed payment of a payroll, kept as history."""

    payroll_id: int
    employee_id: int
    channel: PaymentChannel
    amount: Decimal
    payment_date: date
    payment_method: str
    payment_reference: Optional[str] = None
    payment_id: Optional[int] = None

    @property
    def pays_hand(self) -> bool:
        return self.channel in (PaymentChannel.HAND, PaymentChannel.BOTH)

    @property
    def pays_bank(self) -> bool:
        return self.channel in (PaymentChannel.BANK, PaymentChannel.BOTH)


@dataclass(frozen=True)
class BatchItemResult:
    employee_id: int
    success: bool
    payroll: Optional[Payroll] = None
    error: Optional[str] = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
