from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ...payroll.model import SalaryAdjustment
from ...salary.config import SalaryConfig
from ..model import AttendanceRecord


@dataclass(frozen=True)
class PayRates:
    """Rates derived from one employee's base salary for one calculation."""

    daily: Decimal
    hourly: Decimal
    minute: Decimal


class AdjustmentRule(ABC):
    """Strategy Pattern: one attendance rule that may produce an adjustment line."""

    @abstractmethod
    def apply(self, record: AttendanceRecord, rates: PayRates, config: SalaryConfig) -> Optional[SalaryAdjustment]:
        raise NotImplementedError
