from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import require_amount
from ..core.constants import DEFAULT_LIQUIDATION_PAYMENT_CONCEPT, DEFAULT_LIQUIDATION_PAYMENT_METHOD
from ..core.enums import PaymentMethod
from ..core.exceptions import (
    ConcurrencyConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .model import GenerationSummary, Liquidation, LiquidationCalculation, LiquidationPayment, amounts_of
from .regeneration import LiquidationRegenerationWorkflow
from .repository import LiquidationRepository

logger = logging.getLogger(__name__)


class LiquidationService:
    def __init__(
        self,
        liquidations: LiquidationRepository,
        employees: EmployeeRepository,
        workflow: LiquidationRegenerationWorkflow,
    ):
        self._liquidations = liquidations
        self._employees = employees
        self._workflow = workflow

    def get(self, liquidation_id: int) -> Liquidation:
        liq = self._liquidations.get_by_id(int(liquidation_id))
        if liq is None:
            raise NotFoundError(f"Liquidation {liquidation_id} not found")
        return liq

    def list_pending(self) -> Sequence[Liquidation]:
        return self._liquidations.list_pending()

    def payment_history(self, liquidation_id: Optional[int] = None) -> Sequence[LiquidationPayment]:
        """Recorded settlement payments, newest first; all of them or those of one liquidation."""
        if liquidation_id is not None:
            self.get(liquidation_id)
        return self._liquidations.list_payments(None if liquidation_id is None else int(liquidation_id))

    def generate_for_terminated(self) -> GenerationSummary:
        """Create or refresh the liquidation of every terminated employee.

        Paid liquidations and employees without dates are skipped, unpaid ones are
        regenerated, missing ones are created at version 1.
        """
        summary = GenerationSummary()
        for employee in self._employees.list_terminated():
            if employee.hire_date is None or employee.termination_date is None:
                summary.skipped += 1
                continue

            existing = self._liquidations.get_active_for_employee(employee.employee_id)
            try:
                if existing is not None and existing.is_paid:
                    summary.skipped += 1
                elif existing is not None:
                    self._workflow.regenerate(existing.liquidation_id)
                    summary.updated += 1
                else:
                    calc = self._workflow.calculate_for(employee)
                    self._liquidations.insert(_new_liquidation(employee.employee_id, employee.termination_date, calc))
                    summary.generated += 1
            except DomainError as exc:
                logger.warning("Liquidation not generated for employee %s: %s", employee.employee_id, exc)
                summary.errors.append(f"{employee.full_name}: {exc}")

        logger.info(
            "Liquidations generated=%s updated=%s skipped=%s errors=%s",
            summary.generated,
            summary.updated,
            summary.skipped,
            len(summary.errors),
        )
        return summary

    def set_inclusions(
        self,
        liquidation_id: int,
        *,
        include_vacation: bool,
        include_bonus: bool,
    ) -> Liquidation:
        liq = self.get(liquidation_id)
        if liq.is_paid:
            raise InvalidStateError(f"Liquidation {liquidation_id} is paid and cannot be modified")
        if liq.is_superseded:
            raise InvalidStateError(f"Liquidation {liquidation_id} was superseded by a newer version")

        total = liq.total_for(bool(include_vacation), bool(include_bonus))
        applied = self._liquidations.update_inclusions(
            int(liquidation_id),
            include_vacation=bool(include_vacation),
            include_bonus=bool(include_bonus),
            total_amount=total,
            expected_version=liq.version,
        )
        if not applied:
            raise ConcurrencyConflictError(f"Liquidation {liquidation_id} changed while updating inclusions")
        return self.get(liquidation_id)

    def confirm_payment(
        self,
        liquidation_id: int,
        *,
        amount: Any = None,
        paid_on: Optional[date] = None,
        method: str = DEFAULT_LIQUIDATION_PAYMENT_METHOD,
        concept: str = DEFAULT_LIQUIDATION_PAYMENT_CONCEPT,
        notes: Optional[str] = None,
    ) -> Liquidation:
        liq = self.get(liquidation_id)
        if liq.is_paid:
            raise InvalidStateError(f"Liquidation {liquidation_id} is already paid")
        if liq.is_superseded:
            raise InvalidStateError(f"Liquidation {liquidation_id} was superseded by a newer version")

        try:
            method = PaymentMethod(method).value
        except ValueError as exc:
            raise ValidationError(f"Unknown payment method {method!r}") from exc
        payment = LiquidationPayment(
            liquidation_id=int(liquidation_id),
            employee_id=liq.employee_id,
            amount=require_amount(liq.total_amount if amount is None else amount, "amount"),
            payment_date=paid_on or today_local(),
            concept=concept,
            notes=notes,
        )
        if not self._liquidations.record_payment(payment, method):
            raise InvalidStateError(f"Liquidation {liquidation_id} is already paid")

        logger.info("Liquidation %s paid amount=%s method=%s", liquidation_id, payment.amount, method)
        return self.get(liquidation_id)


def _new_liquidation(employee_id: int, termination_date: date, calc: LiquidationCalculation) -> Liquidation:
    return Liquidation(
        employee_id=employee_id,
        termination_date=termination_date,
        total_amount=calc.total_amount,
        include_vacation=calc.include_vacation,
        include_bonus=calc.include_bonus,
        **amounts_of(calc),
    )
