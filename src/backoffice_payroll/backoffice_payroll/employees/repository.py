from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..payroll.model import EmployeeSalary
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Note: services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def fetch_salary_fields(self, employee_id: int) -> Optional[EmployeeSalary]:
        raise NotImplementedError

    def list_active_ids(self) -> Sequence[int]:
        raise NotImplementedError

    def list_terminated(self) -> Sequence[Employee]:
        """Inactive employees that carry a termination date, most recent first."""

        raise NotImplementedError
