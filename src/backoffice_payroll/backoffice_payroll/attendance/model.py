from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class AttendanceRecord:
    """One calendar day of attendance for one employee (read-only input)."""

    work_date: date
    is_absent: bool = False
    is_justified: bool = False
    is_holiday: bool = False
    late_minutes: int = 0
    early_departure_minutes: int = 0
    extra_minutes: int = 0
