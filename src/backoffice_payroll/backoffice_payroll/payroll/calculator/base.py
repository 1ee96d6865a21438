from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..model import EmployeeSalary, PayrollCalculation, SalaryAdjustment


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute_final_salary(
        self,
        employee: EmployeeSalary,
        deductions: Sequence[SalaryAdjustment],
        additions: Sequence[SalaryAdjustment],
    ) -> PayrollCalculation:
        raise NotImplementedError
