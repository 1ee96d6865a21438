from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.adjustments import AttendanceAdjustmentCalculator
from ..attendance.repository import AttendanceRepository
from ..common.cache import LookupCache
from ..common.datetime_utils import month_bounds, today_local
from ..common.validators import require_period
from ..core.constants import DEFAULT_CACHE_TTL_SECONDS
from ..core.enums import AdjustmentKind, PaymentChannel, PaymentMethod
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import EmployeeSalary, Payroll, PayrollCalculation, PayrollPayment, PayrollValidation
from .repository import PayrollRepository
from .validator import PayrollValidator

logger = logging.getLogger(__name__)


class PayrollService:
    """Single-employee payroll: compute, validate, persist, and record payments."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        payrolls: PayrollRepository,
        *,
        adjustments: Optional[AttendanceAdjustmentCalculator] = None,
        calculator: Optional[PayrollCalculator] = None,
        validator: Optional[PayrollValidator] = None,
        employee_cache: Optional[LookupCache[EmployeeSalary]] = None,
        payroll_cache: Optional[LookupCache[Payroll]] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._payrolls = payrolls
        self._adjustments = adjustments or AttendanceAdjustmentCalculator()
        self._calculator = calculator or StandardPayrollCalculator()
        self._validator = validator or PayrollValidator()
        self._employee_cache = employee_cache or LookupCache(DEFAULT_CACHE_TTL_SECONDS)
        self._payroll_cache = payroll_cache or LookupCache(DEFAULT_CACHE_TTL_SECONDS)

    def salary_fields(self, employee_id: int) -> EmployeeSalary:
        salary = self._employee_cache.get_or_load(
            int(employee_id), lambda: self._employees.fetch_salary_fields(int(employee_id))
        )
        if salary is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return salary

    def existing_for_period(self, employee_id: int, month: int, year: int) -> Optional[Payroll]:
        key = (int(employee_id), int(month), int(year))
        return self._payroll_cache.get_or_load(key, lambda: self._payrolls.get_for_period(*key))

    def calculate(self, employee_id: int, month: int, year: int) -> tuple[PayrollCalculation, PayrollValidation]:
        month, year = require_period(month, year)
        salary = self.salary_fields(employee_id)
        errors = [
            *self._validator.validate_amount(salary.hand_salary, "hand_salary"),
            *self._validator.validate_amount(salary.bank_salary, "bank_salary"),
        ]
        if errors:
            raise ValidationError(f"Invalid salary fields for employee {employee_id}", errors)

        start, end = month_bounds(month, year)
        records = self._attendance.fetch_attendance(int(employee_id), start, end)
        deductions, additions = self._adjustments.compute_adjustments(records, salary.base_salary)

        errors = [
            *self._validator.validate_adjustments([d.amount for d in deductions], AdjustmentKind.DEDUCTION),
            *self._validator.validate_adjustments([a.amount for a in additions], AdjustmentKind.ADDITION),
        ]
        if errors:
            raise ValidationError(f"Invalid adjustments for employee {employee_id}", errors)

        calc = self._calculator.compute_final_salary(salary, deductions, additions)
        return calc, self._validator.validate(calc)

    def generate(self, employee_id: int, month: int, year: int, *, overwrite: bool = False) -> Payroll:
        """Compute and store the payroll of one employee for one month.

        An existing row for the period is refused unless ``overwrite`` is set, in
        which case it is updated in place (only while neither channel is paid).
        """
        payroll, _ = self.generate_with_validation(employee_id, month, year, overwrite=overwrite)
        return payroll

    def generate_with_validation(
        self, employee_id: int, month: int, year: int, *, overwrite: bool = False
    ) -> tuple[Payroll, PayrollValidation]:
        month, year = require_period(month, year)
        existing = self.existing_for_period(employee_id, month, year)
        if existing is not None:
            if not overwrite:
                raise InvalidStateError(f"Payroll for employee {employee_id} already generated for {month:02d}/{year}")
            if existing.is_paid_hand or existing.is_paid_bank:
                raise InvalidStateError(f"Payroll {existing.payroll_id} has payments recorded and cannot be recomputed")

        calc, validation = self.calculate(employee_id, month, year)
        self._validator.ensure_persistable(calc)

        saved = self._payrolls.upsert(_to_payroll(int(employee_id), month, year, calc))
        self._payroll_cache.invalidate((int(employee_id), month, year))
        logger.info(
            "Payroll stored employee=%s period=%02d/%s total=%s deductions=%s additions=%s",
            employee_id,
            month,
            year,
            saved.total_salary,
            saved.deductions_total,
            saved.additions_total,
        )
        return saved, validation

    def delete_for_period(self, employee_id: int, month: int, year: int) -> bool:
        deleted = self._payrolls.delete_for_period(int(employee_id), int(month), int(year))
        self._payroll_cache.invalidate((int(employee_id), int(month), int(year)))
        if deleted:
            logger.info("Payroll deleted employee=%s period=%02d/%s", employee_id, int(month), year)
        return deleted

    def list_for_period(self, month: int, year: int, *, is_paid: Optional[bool] = None) -> Sequence[Payroll]:
        month, year = require_period(month, year)
        return self._payrolls.list_for_period(month, year, is_paid)

    def confirm_payment(
        self,
        payroll_id: int,
        channel: PaymentChannel,
        *,
        paid_on: Optional[date] = None,
        method: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> Payroll:
        """Mark one or both channels paid and keep a history row of the payment.

        ``method`` defaults to cash for the hand channel and transfer otherwise.
        """
        payroll = self._payrolls.get_by_id(int(payroll_id))
        if payroll is None:
            raise NotFoundError(f"Payroll {payroll_id} not found")
        if payroll.is_paid:
            raise InvalidStateError(f"Payroll {payroll_id} is already fully paid")

        pay_hand = channel in (PaymentChannel.HAND, PaymentChannel.BOTH) and not payroll.is_paid_hand
        pay_bank = channel in (PaymentChannel.BANK, PaymentChannel.BOTH) and not payroll.is_paid_bank
        if not pay_hand and not pay_bank:
            raise InvalidStateError(f"Payroll {payroll_id} is already paid by {channel.value}")

        if method is None:
            method = PaymentMethod.CASH.value if channel == PaymentChannel.HAND else PaymentMethod.TRANSFER.value
        try:
            method = PaymentMethod(method).value
        except ValueError as exc:
            raise ValidationError(f"Unknown payment method {method!r}") from exc

        if pay_hand and pay_bank:
            paid_channel, amount = PaymentChannel.BOTH, payroll.total_salary
        elif pay_hand:
            paid_channel, amount = PaymentChannel.HAND, payroll.hand_amount
        else:
            paid_channel, amount = PaymentChannel.BANK, payroll.bank_salary

        payment = PayrollPayment(
            payroll_id=int(payroll_id),
            employee_id=payroll.employee_id,
            channel=paid_channel,
            amount=amount,
            payment_date=paid_on or today_local(),
            payment_method=method,
            payment_reference=reference or None,
        )
        if not self._payrolls.record_payment(payment):
            raise InvalidStateError(f"Payroll {payroll_id} is already paid by {paid_channel.value}")

        self._payroll_cache.invalidate((payroll.employee_id, payroll.month, payroll.year))
        logger.info(
            "Payroll %s payment confirmed channel=%s amount=%s method=%s on %s",
            payroll_id,
            paid_channel.value,
            amount,
            method,
            payment.payment_date,
        )

        updated = self._payrolls.get_by_id(int(payroll_id))
        if updated is None:
            raise NotFoundError(f"Payroll {payroll_id} not found")
        return updated

    def payment_history(self, payroll_id: int) -> Sequence[PayrollPayment]:
        if self._payrolls.get_by_id(int(payroll_id)) is None:
            raise NotFoundError(f"Payroll {payroll_id} not found")
        return self._payrolls.list_payments(int(payroll_id))


def _to_payroll(employee_id: int, month: int, year: int, calc: PayrollCalculation) -> Payroll:
    return Payroll(
        employee_id=employee_id,
        month=month,
        year=year,
        hand_salary=calc.hand_salary,
        bank_salary=calc.bank_salary,
        base_salary=calc.base_salary,
        deductions_total=calc.deductions.total,
        additions_total=calc.additions.total,
        adjusted_hand_salary=calc.adjusted_hand_salary,
        total_salary=calc.total_salary,
        has_attendance_bonus=calc.has_attendance_bonus,
        attendance_bonus=calc.bonus_paid,
        details=calc.deductions.details + calc.additions.details,
    )
