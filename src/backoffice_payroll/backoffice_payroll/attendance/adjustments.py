from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AdjustmentKind
from ..payroll.model import SalaryAdjustment
from ..salary.config import DEFAULT_SALARY_CONFIG, SalaryConfig, require_valid_config
from .factory import AdjustmentRuleFactory
from .model import AttendanceRecord
from .rules.base import AdjustmentRule, PayRates


class AttendanceAdjustmentCalculator:
    """Turns a month of attendance days into deduction and addition lines.

    Pure: the same records and salary always give the same lines, in the same order.
    """

    def __init__(
        self,
        config: SalaryConfig = DEFAULT_SALARY_CONFIG,
        *,
        rules: Optional[Sequence[AdjustmentRule]] = None,
    ):
        self._config = require_valid_config(config)
        self._rules = tuple(rules) if rules is not None else AdjustmentRuleFactory().build()

    @property
    def config(self) -> SalaryConfig:
        return self._config

    def daily_rate(self, base_salary: Decimal) -> Decimal:
        return Decimal(base_salary) / self._config.working_days_per_month

    def hourly_rate(self, base_salary: Decimal) -> Decimal:
        return self.daily_rate(base_salary) / self._config.working_hours_per_day

    def minute_rate(self, base_salary: Decimal) -> Decimal:
        return self.hourly_rate(base_salary) / 60

    def rates_for(self, base_salary: Decimal) -> PayRates:
        return PayRates(
            daily=self.daily_rate(base_salary),
            hourly=self.hourly_rate(base_salary),
            minute=self.minute_rate(base_salary),
        )

    def compute_adjustments(
        self,
        records: Sequence[AttendanceRecord],
        base_salary: Decimal,
    ) -> tuple[list[SalaryAdjustment], list[SalaryAdjustment]]:
        rates = self.rates_for(base_salary)
        deductions: list[SalaryAdjustment] = []
        additions: list[SalaryAdjustment] = []

        for record in records:
            for rule in self._rules:
                line = rule.apply(record, rates, self._config)
                if line is None:
                    continue
                if line.kind == AdjustmentKind.DEDUCTION:
                    deductions.append(line)
                else:
                    additions.append(line)

        return deductions, additions
