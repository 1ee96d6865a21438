from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from ..payroll.model import EmployeeSalary
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, first_name, last_name, status, hire_date, termination_date,
    hand_salary, bank_salary, has_attendance_bonus, attendance_bonus_amount
"""


def _to_employee(r: Dict[str, Any]) -> Employee:
    bonus = r.get("attendance_bonus_amount")
    return Employee(
        employee_id=int(r["employee_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        status=EmployeeStatus(r["status"]),
        hire_date=normalize_mysql_date(r.get("hire_date")),
        termination_date=normalize_mysql_date(r.get("termination_date")),
        hand_salary=to_decimal(r.get("hand_salary")),
        bank_salary=to_decimal(r.get("bank_salary")),
        has_attendance_bonus=bool(r.get("has_attendance_bonus")),
        attendance_bonus_amount=to_decimal(bonus) if bonus is not None else None,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def fetch_salary_fields(self, employee_id: int) -> Optional[EmployeeSalary]:
        employee = self.get_by_id(employee_id)
        return employee.salary() if employee else None

    def list_active_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id FROM employees WHERE status=%s ORDER BY employee_id",
                (EmployeeStatus.ACTIVE.value,),
            )
            return [int(r["employee_id"]) for r in fetchall(cur)]

    def list_terminated(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE status=%s AND termination_date IS NOT NULL
                ORDER BY termination_date DESC
                """,
                (EmployeeStatus.INACTIVE.value,),
            )
            return [_to_employee(r) for r in fetchall(cur)]
