from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO
from ..core.enums import EmployeeStatus
from ..payroll.model import EmployeeSalary


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee (plain data, no DB access)."""

    employee_id: int
    first_name: str
    last_name: str
    status: EmployeeStatus
    hire_date: Optional[date] = None
    termination_date: Optional[date] = None
    hand_salary: Decimal = ZERO
    bank_salary: Decimal = ZERO
    has_attendance_bonus: bool = False
    attendance_bonus_amount: Optional[Decimal] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def monthly_salary(self) -> Decimal:
        return self.hand_salary + self.bank_salary

    def salary(self) -> EmployeeSalary:
        return EmployeeSalary(
            employee_id=self.employee_id,
            hand_salary=self.hand_salary,
            bank_salary=self.bank_salary,
            has_attendance_bonus=self.has_attendance_bonus,
            attendance_bonus_amount=self.attendance_bonus_amount,
        )
