from __future__ import annotations

from typing import Optional

from ...core.enums import AdjustmentKind
from ...payroll.model import SalaryAdjustment
from ...salary.config import SalaryConfig
from ..model import AttendanceRecord
from .base import AdjustmentRule, PayRates


class UnjustifiedAbsenceRule(AdjustmentRule):
    """A full day is deducted for an unjustified absence outside holidays."""

    def apply(self, record: AttendanceRecord, rates: PayRates, config: SalaryConfig) -> Optional[SalaryAdjustment]:
        if not record.is_absent or record.is_justified or record.is_holiday:
            return None
        return SalaryAdjustment(
            kind=AdjustmentKind.DEDUCTION,
            concept="Unjustified Absence",
            amount=rates.daily,
            work_date=record.work_date,
            notes=f"Absent on {record.work_date.isoformat()}",
        )
