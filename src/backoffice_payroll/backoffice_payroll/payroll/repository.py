from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from ..common.money import round_money
from ..core.exceptions import ValidationError
from .model import LatestPayrollSalary, Payroll, PayrollPayment

# Columns computed by the database; the application must never write them.
DERIVED_PAYROLL_COLUMNS = frozenset({"is_paid"})


def assert_no_derived_columns(row: Mapping[str, Any]) -> None:
    written = DERIVED_PAYROLL_COLUMNS.intersection(row)
    if written:
        raise ValidationError(f"Derived payroll columns cannot be written: {', '.join(sorted(written))}")


def payroll_write_row(payroll: Payroll) -> Dict[str, Any]:
    """Column values for an insert/update of the calculation part of a payroll.

    Amounts are rounded to cents here, and only here.
    """
    row: Dict[str, Any] = {
        "employee_id": int(payroll.employee_id),
        "month": int(payroll.month),
        "year": int(payroll.year),
        "hand_salary": round_money(payroll.hand_salary),
        "bank_salary": round_money(payroll.bank_salary),
        "base_salary": round_money(payroll.base_salary),
        "deductions": round_money(payroll.deductions_total),
        "additions": round_money(payroll.additions_total),
        "has_attendance_bonus": int(payroll.has_attendance_bonus),
        "attendance_bonus": round_money(payroll.attendance_bonus),
        "final_hand_salary": round_money(payroll.adjusted_hand_salary),
        "total_salary": round_money(payroll.total_salary),
        "notes": payroll.notes,
    }
    assert_no_derived_columns(row)
    return row


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def get_for_period(self, employee_id: int, month: int, year: int) -> Optional[Payroll]:
        raise NotImplementedError

    def fetch_latest_salary(self, employee_id: int) -> Optional[LatestPayrollSalary]:
        """Salary fields of the most recent payroll (by year, then month) of an employee."""

        raise NotImplementedError

    def upsert(self, payroll: Payroll) -> Payroll:
        """Insert or update the row for (employee_id, month, year) and replace its detail lines.

        Payment flags of an existing row are left untouched.
        """

        raise NotImplementedError

    def delete_for_period(self, employee_id: int, month: int, year: int) -> bool:
        raise NotImplementedError

    def list_for_period(self, month: int, year: int, is_paid: Optional[bool] = None) -> Sequence[Payroll]:
        """Payrolls of a month ordered by employee; ``is_paid`` filters paid or pending rows."""

        raise NotImplementedError

    def record_payment(self, payment: PayrollPayment) -> bool:
        """Mark the payment's channels paid and insert its history row, in one transaction.

        ``is_paid`` follows from the two flags. Returns False (and writes nothing)
        when one of those channels is already paid.
        """

        raise NotImplementedError

    def list_payments(self, payroll_id: int) -> Sequence[PayrollPayment]:
        raise NotImplementedError
