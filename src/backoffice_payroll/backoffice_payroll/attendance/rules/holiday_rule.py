from __future__ import annotations

from typing import Optional

from ...core.enums import AdjustmentKind
from ...payroll.model import SalaryAdjustment
from ...salary.config import SalaryConfig
from ..model import AttendanceRecord
from .base import AdjustmentRule, PayRates


class HolidayWorkedRule(AdjustmentRule):
    """Working on a holiday pays a full day at the holiday multiplier."""

    def apply(self, record: AttendanceRecord, rates: PayRates, config: SalaryConfig) -> Optional[SalaryAdjustment]:
        if not record.is_holiday or record.is_absent:
            return None
        return SalaryAdjustment(
            kind=AdjustmentKind.ADDITION,
            concept="Holiday Worked",
            amount=rates.daily * config.holiday_multiplier,
            work_date=record.work_date,
            notes="Worked on a holiday",
        )
