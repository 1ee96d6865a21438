from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import MAX_OVERTIME_MINUTES, MIN_OVERTIME_MINUTES
from .rules.absence_rule import UnjustifiedAbsenceRule
from .rules.base import AdjustmentRule
from .rules.early_departure_rule import EarlyDepartureRule
from .rules.holiday_rule import HolidayWorkedRule
from .rules.late_rule import LateArrivalRule
from .rules.overtime_rule import OvertimeRule


@dataclass
class AdjustmentRuleFactory:
    """Factory Pattern: build the ordered rule set applied to each attendance day."""

    min_overtime_minutes: int = MIN_OVERTIME_MINUTES
    max_overtime_minutes: int = MAX_OVERTIME_MINUTES

    def build(self) -> tuple[AdjustmentRule, ...]:
        # Order only affects the order of output lines, never the amounts.
        return (
            UnjustifiedAbsenceRule(),
            LateArrivalRule(),
            EarlyDepartureRule(),
            OvertimeRule(min_minutes=self.min_overtime_minutes, max_minutes=self.max_overtime_minutes),
            HolidayWorkedRule(),
        )
