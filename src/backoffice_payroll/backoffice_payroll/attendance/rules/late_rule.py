from __future__ import annotations

from typing import Optional

from ...core.enums import AdjustmentKind
from ...payroll.model import SalaryAdjustment
from ...salary.config import SalaryConfig
from ..model import AttendanceRecord
from .base import AdjustmentRule, PayRates


class LateArrivalRule(AdjustmentRule):
    """Late arrival, charged per minute."""

    def apply(self, record: AttendanceRecord, rates: PayRates, config: SalaryConfig) -> Optional[SalaryAdjustment]:
        if record.late_minutes <= 0:
            return None
        return SalaryAdjustment(
            kind=AdjustmentKind.DEDUCTION,
            concept="Late Arrival",
            amount=rates.minute * record.late_minutes,
            work_date=record.work_date,
            notes=f"{record.late_minutes} minutes late",
        )
