from __future__ import annotations

from typing import Sequence

from ...common.money import ZERO
from ..model import AdjustmentGroup, AttendanceBonus, EmployeeSalary, PayrollCalculation, SalaryAdjustment
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: hand salary - deductions + additions, plus bank salary, plus a flat bonus.

    The attendance bonus is all-or-nothing and is added after netting. Negative
    inputs are not clamped; the validator is the one that flags them.
    """

    def compute_final_salary(
        self,
        employee: EmployeeSalary,
        deductions: Sequence[SalaryAdjustment],
        additions: Sequence[SalaryAdjustment],
    ) -> PayrollCalculation:
        deduction_group = AdjustmentGroup.of(deductions)
        addition_group = AdjustmentGroup.of(additions)

        adjusted_hand_salary = employee.hand_salary - deduction_group.total + addition_group.total

        bonus = None
        bonus_amount = ZERO
        if employee.has_attendance_bonus and employee.attendance_bonus_amount:
            bonus = AttendanceBonus(amount=employee.attendance_bonus_amount, applied=True)
            bonus_amount = employee.attendance_bonus_amount

        return PayrollCalculation(
            hand_salary=employee.hand_salary,
            bank_salary=employee.bank_salary,
            base_salary=employee.base_salary,
            deductions=deduction_group,
            additions=addition_group,
            adjusted_hand_salary=adjusted_hand_salary,
            total_salary=adjusted_hand_salary + employee.bank_salary + bonus_amount,
            attendance_bonus=bonus,
            has_attendance_bonus=employee.has_attendance_bonus,
        )
