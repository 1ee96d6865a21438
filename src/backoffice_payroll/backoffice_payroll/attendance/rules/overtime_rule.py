from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...core.constants import MAX_OVERTIME_MINUTES, MIN_OVERTIME_MINUTES
from ...core.enums import AdjustmentKind
from ...payroll.model import SalaryAdjustment
from ...salary.config import SalaryConfig
from ..model import AttendanceRecord
from .base import AdjustmentRule, PayRates


@dataclass(frozen=True)
class OvertimeRule(AdjustmentRule):
    """Extra minutes paid at the overtime multiplier.

    Below ``min_minutes`` nothing is paid; above ``max_minutes`` the count is capped.
    """

    min_minutes: int = MIN_OVERTIME_MINUTES
    max_minutes: int = MAX_OVERTIME_MINUTES

    def apply(self, record: AttendanceRecord, rates: PayRates, config: SalaryConfig) -> Optional[SalaryAdjustment]:
        if record.extra_minutes < self.min_minutes:
            return None
        minutes = min(record.extra_minutes, self.max_minutes)
        return SalaryAdjustment(
            kind=AdjustmentKind.ADDITION,
            concept="Overtime",
            amount=rates.minute * minutes * config.overtime_multiplier,
            work_date=record.work_date,
            notes=f"{minutes} extra minutes",
        )
