from __future__ import annotations

from typing import Optional

from ...core.enums import AdjustmentKind
from ...payroll.model import SalaryAdjustment
from ...salary.config import SalaryConfig
from ..model import AttendanceRecord
from .base import AdjustmentRule, PayRates


class EarlyDepartureRule(AdjustmentRule):
    """Leaving before the end of the shift, charged per minute."""

    def apply(self, record: AttendanceRecord, rates: PayRates, config: SalaryConfig) -> Optional[SalaryAdjustment]:
        if record.early_departure_minutes <= 0:
            return None
        return SalaryAdjustment(
            kind=AdjustmentKind.DEDUCTION,
            concept="Early Departure",
            amount=rates.minute * record.early_departure_minutes,
            work_date=record.work_date,
            notes=f"{record.early_departure_minutes} minutes early",
        )
