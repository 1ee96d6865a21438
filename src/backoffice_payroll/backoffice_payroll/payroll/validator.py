"""Consistency and policy checks run on every payroll before it is persisted."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from ..common.money import ZERO, money_sum
from ..common.validators import amount_violations
from ..core.constants import (
    ATTENDANCE_BONUS_WARNING_RATIO,
    CONSISTENCY_TOLERANCE,
    MAX_ADDITIONS_RATIO,
    MAX_DEDUCTIONS_RATIO,
)
from ..core.enums import AdjustmentKind
from ..core.exceptions import InconsistencyError, ValidationError
from .model import PayrollCalculation, PayrollValidation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Mismatch:
    field: str
    expected: Decimal
    actual: Decimal


def _mismatches(calc: PayrollCalculation) -> list[_Mismatch]:
    expected_adjusted = calc.hand_salary - calc.deductions.total + calc.additions.total
    bonus = calc.attendance_bonus.amount if calc.attendance_bonus and calc.attendance_bonus.applied else ZERO
    expected_total = expected_adjusted + calc.bank_salary + bonus

    out: list[_Mismatch] = []
    if abs(expected_total - calc.total_salary) > CONSISTENCY_TOLERANCE:
        out.append(_Mismatch("total_salary", expected_total, calc.total_salary))
    if abs(expected_adjusted - calc.adjusted_hand_salary) > CONSISTENCY_TOLERANCE:
        out.append(_Mismatch("adjusted_hand_salary", expected_adjusted, calc.adjusted_hand_salary))
    return out


class PayrollValidator:
    def validate(self, calc: PayrollCalculation) -> PayrollValidation:
        errors: list[str] = []
        warnings: list[str] = []

        if calc.adjusted_hand_salary < 0:
            errors.append(f"adjusted_hand_salary cannot be negative (got {calc.adjusted_hand_salary})")

        if calc.total_salary < 0:
            errors.append(f"total_salary cannot be negative (got {calc.total_salary})")

        if calc.hand_salary == 0:
            # No percentage exists; only a non-zero numerator makes that a problem.
            if calc.deductions.total > 0:
                errors.append(
                    f"deductions ({calc.deductions.total}) cannot be checked against hand_salary 0: "
                    "percentage undefined"
                )
            if calc.additions.total > 0:
                warnings.append(
                    f"additions ({calc.additions.total}) cannot be checked against hand_salary 0: "
                    "percentage undefined"
                )
        else:
            if calc.deductions.total / calc.hand_salary > MAX_DEDUCTIONS_RATIO:
                errors.append(
                    f"deductions ({calc.deductions.total}) exceed {MAX_DEDUCTIONS_RATIO * 100:.0f}% "
                    f"of hand_salary ({calc.hand_salary})"
                )
            if calc.additions.total / calc.hand_salary > MAX_ADDITIONS_RATIO:
                warnings.append(
                    f"additions ({calc.additions.total}) exceed {MAX_ADDITIONS_RATIO * 100:.0f}% "
                    f"of hand_salary ({calc.hand_salary})"
                )

        if calc.attendance_bonus and calc.attendance_bonus.applied:
            if calc.attendance_bonus.amount <= 0:
                errors.append(f"attendance_bonus must be greater than 0 (got {calc.attendance_bonus.amount})")
            if calc.attendance_bonus.amount > calc.hand_salary * ATTENDANCE_BONUS_WARNING_RATIO:
                warnings.append(
                    f"attendance_bonus ({calc.attendance_bonus.amount}) exceeds "
                    f"{ATTENDANCE_BONUS_WARNING_RATIO * 100:.0f}% of hand_salary ({calc.hand_salary})"
                )

        for m in _mismatches(calc):
            errors.append(f"{m.field} mismatch: expected {m.expected}, reported {m.actual}")

        return PayrollValidation(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))

    def ensure_persistable(self, calc: PayrollCalculation) -> PayrollValidation:
        """Validate and raise if the payroll must not be stored.

        Total mismatches raise ``InconsistencyError``; other hard errors raise ``ValidationError``.
        """
        mismatches = _mismatches(calc)
        if mismatches:
            first = mismatches[0]
            for m in mismatches:
                logger.error("Payroll inconsistency on %s: expected=%s actual=%s", m.field, m.expected, m.actual)
            raise InconsistencyError(first.field, first.expected, first.actual)

        result = self.validate(calc)
        if not result.is_valid:
            raise ValidationError("Payroll calculation is not valid", result.errors)
        for w in result.warnings:
            logger.warning("Payroll warning: %s", w)
        return result

    @staticmethod
    def validate_amount(amount: Any, field_name: str) -> list[str]:
        return amount_violations(amount, field_name)

    @staticmethod
    def validate_adjustments(amounts: Iterable[Decimal], kind: AdjustmentKind) -> list[str]:
        errors: list[str] = []
        items = list(amounts)
        label = "deductions" if kind == AdjustmentKind.DEDUCTION else "additions"

        if money_sum(items) < 0:
            errors.append(f"total {label} cannot be negative")

        if any(a < 0 for a in items):
            errors.append(f"some {label} have negative amounts")

        return errors
