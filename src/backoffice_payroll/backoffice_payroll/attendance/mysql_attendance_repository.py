from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch_attendance(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT work_date, is_absent, is_justified, is_holiday,
                       late_minutes, early_departure_minutes, extra_minutes
                FROM attendance
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(employee_id), start_date, end_date),
            )
            rows = fetchall(cur)
            return [
                AttendanceRecord(
                    work_date=normalize_mysql_date(r["work_date"]),
                    is_absent=bool(r.get("is_absent")),
                    is_justified=bool(r.get("is_justified")),
                    is_holiday=bool(r.get("is_holiday")),
                    late_minutes=max(int(r.get("late_minutes") or 0), 0),
                    early_departure_minutes=max(int(r.get("early_departure_minutes") or 0), 0),
                    extra_minutes=max(int(r.get("extra_minutes") or 0), 0),
                )
                for r in rows
            ]
