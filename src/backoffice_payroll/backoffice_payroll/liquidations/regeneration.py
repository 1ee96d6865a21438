from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO
from ..core.enums import RegenerationMode
from ..core.exceptions import ConcurrencyConflictError, InvalidStateError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..payroll.repository import PayrollRepository
from .calculator import LiquidationCalculator, apply_inclusions
from .model import Liquidation, LiquidationCalculation, amounts_of
from .repository import LiquidationRepository

logger = logging.getLogger(__name__)


class LiquidationRegenerationWorkflow:
    """Recomputes an unpaid liquidation from the employee's current data.

    Identity, payment state and the human-chosen inclusion flags survive a
    regeneration; only the calculated amounts change.
    """

    def __init__(
        self,
        liquidations: LiquidationRepository,
        employees: EmployeeRepository,
        payrolls: PayrollRepository,
        *,
        calculator: Optional[LiquidationCalculator] = None,
        default_mode: RegenerationMode = RegenerationMode.IN_PLACE,
    ):
        self._liquidations = liquidations
        self._employees = employees
        self._payrolls = payrolls
        self._calculator = calculator or LiquidationCalculator()
        self._default_mode = default_mode

    def monthly_salary(self, employee: Employee) -> Decimal:
        """Hand + bank salary, falling back to the employee's most recent payroll."""
        salary = employee.monthly_salary
        if salary > ZERO:
            return salary

        latest = self._payrolls.fetch_latest_salary(employee.employee_id)
        if latest is not None:
            salary = latest.base_salary + latest.bank_salary
            logger.info("Employee %s has no salary on record, using latest payroll (%s)", employee.employee_id, salary)
        if salary <= ZERO:
            raise ValidationError(f"Employee {employee.employee_id} has no salary to compute a liquidation from")
        return salary

    def calculate_for(self, employee: Employee, termination_date: Optional[date] = None) -> LiquidationCalculation:
        termination = employee.termination_date or termination_date
        if employee.hire_date is None or termination is None:
            raise ValidationError(
                "invalid employment dates",
                [f"Employee {employee.employee_id} is missing hire or termination date"],
            )
        return self._calculator.compute(employee.hire_date, termination, self.monthly_salary(employee))

    def regenerate(
        self,
        liquidation_id: int,
        *,
        mode: Optional[RegenerationMode] = None,
        expected_version: Optional[int] = None,
    ) -> Liquidation:
        mode = mode or self._default_mode
        current = self._liquidations.get_by_id(int(liquidation_id))
        if current is None:
            raise NotFoundError(f"Liquidation {liquidation_id} not found")
        if current.is_paid:
            raise InvalidStateError(f"Liquidation {liquidation_id} is paid and cannot be regenerated")
        if current.is_superseded:
            raise InvalidStateError(f"Liquidation {liquidation_id} was superseded by a newer version")
        if expected_version is not None and int(expected_version) != current.version:
            raise ConcurrencyConflictError(
                f"Liquidation {liquidation_id} is at version {current.version}, expected {expected_version}"
            )

        employee = self._employees.get_by_id(current.employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {current.employee_id} not found")

        calc = self.calculate_for(employee, current.termination_date)
        calc = apply_inclusions(calc, current.include_vacation, current.include_bonus)
        recalculated = replace(
            current,
            termination_date=employee.termination_date or current.termination_date,
            total_amount=calc.total_amount,
            version=current.version + 1,
            **amounts_of(calc),
        )

        if mode is RegenerationMode.NEW_VERSION:
            saved = self._liquidations.supersede(
                replace(recalculated, liquidation_id=None, previous_version_id=current.liquidation_id),
                current.version,
            )
            if saved is None:
                raise ConcurrencyConflictError(f"Liquidation {liquidation_id} changed while regenerating")
        else:
            if not self._liquidations.update_if_version(recalculated, current.version):
                raise ConcurrencyConflictError(f"Liquidation {liquidation_id} changed while regenerating")
            saved = self._liquidations.get_by_id(int(liquidation_id)) or recalculated

        logger.info(
            "Liquidation %s regenerated mode=%s version=%s total=%s",
            liquidation_id,
            mode.value,
            saved.version,
            saved.total_amount,
        )
        return saved
