from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def fetch_attendance(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Attendance days of one employee, both bounds inclusive, ordered by date."""

        raise NotImplementedError
