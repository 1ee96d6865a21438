from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.money import round_money, to_decimal
from ..core.enums import AdjustmentKind, PaymentChannel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import LatestPayrollSalary, Payroll, PayrollPayment, SalaryAdjustment
from .repository import PayrollRepository, assert_no_derived_columns, payroll_write_row

_COLUMNS = """
    payroll_id, employee_id, month, year, hand_salary, bank_salary, base_salary,
    deductions, additions, has_attendance_bonus, attendance_bonus, final_hand_salary,
    total_salary, is_paid_hand, is_paid_bank, hand_payment_date, bank_payment_date,
    payment_method, payment_reference, notes
"""

# Columns refreshed when a payroll for the same period is generated again.
_UPDATABLE = (
    "hand_salary",
    "bank_salary",
    "base_salary",
    "deductions",
    "additions",
    "has_attendance_bonus",
    "attendance_bonus",
    "final_hand_salary",
    "total_salary",
    "notes",
)


def _to_payroll(r: Dict[str, Any], details: tuple[SalaryAdjustment, ...] = ()) -> Payroll:
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        hand_salary=to_decimal(r.get("hand_salary")),
        bank_salary=to_decimal(r.get("bank_salary")),
        base_salary=to_decimal(r.get("base_salary")),
        deductions_total=to_decimal(r.get("deductions")),
        additions_total=to_decimal(r.get("additions")),
        adjusted_hand_salary=to_decimal(r.get("final_hand_salary")),
        total_salary=to_decimal(r.get("total_salary")),
        has_attendance_bonus=bool(r.get("has_attendance_bonus")),
        attendance_bonus=to_decimal(r.get("attendance_bonus")),
        details=details,
        is_paid_hand=bool(r.get("is_paid_hand")),
        is_paid_bank=bool(r.get("is_paid_bank")),
        hand_payment_date=normalize_mysql_date(r.get("hand_payment_date")),
        bank_payment_date=normalize_mysql_date(r.get("bank_payment_date")),
        payment_method=r.get("payment_method"),
        payment_reference=r.get("payment_reference"),
        notes=r.get("notes"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _details(self, cur, payroll_id: int) -> tuple[SalaryAdjustment, ...]:
        cur.execute(
            """
            SELECT type, concept, amount, work_date, notes
            FROM payroll_details
            WHERE payroll_id=%s
            ORDER BY detail_id
            """,
            (int(payroll_id),),
        )
        return tuple(
            SalaryAdjustment(
                kind=AdjustmentKind(r["type"]),
                concept=r["concept"],
                amount=to_decimal(r.get("amount")),
                work_date=normalize_mysql_date(r["work_date"]),
                notes=r.get("notes") or "",
            )
            for r in fetchall(cur)
        )

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            if not r:
                return None
            return _to_payroll(r, self._details(cur, int(r["payroll_id"])))

    def get_for_period(self, employee_id: int, month: int, year: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll WHERE employee_id=%s AND month=%s AND year=%s",
                (int(employee_id), int(month), int(year)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return _to_payroll(r, self._details(cur, int(r["payroll_id"])))

    def fetch_latest_salary(self, employee_id: int) -> Optional[LatestPayrollSalary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT base_salary, bank_salary
                FROM payroll
                WHERE employee_id=%s
                ORDER BY year DESC, month DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LatestPayrollSalary(
                base_salary=to_decimal(r.get("base_salary")),
                bank_salary=to_decimal(r.get("bank_salary")),
            )

    def upsert(self, payroll: Payroll) -> Payroll:
        row = payroll_write_row(payroll)
        columns = list(row)
        placeholders = ", ".join(["%s"] * len(columns))
        updates = ", ".join(f"{c}=VALUES({c})" for c in _UPDATABLE)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO payroll ({", ".join(columns)})
                VALUES ({placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                tuple(row[c] for c in columns),
            )
            cur.execute(
                "SELECT payroll_id FROM payroll WHERE employee_id=%s AND month=%s AND year=%s",
                (row["employee_id"], row["month"], row["year"]),
            )
            payroll_id = int(fetchone(cur)["payroll_id"])

            cur.execute("DELETE FROM payroll_details WHERE payroll_id=%s", (payroll_id,))
            for d in payroll.details:
                cur.execute(
                    """
                    INSERT INTO payroll_details(payroll_id, type, concept, amount, work_date, notes)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (payroll_id, d.kind.value, d.concept, round_money(d.amount), d.work_date, d.notes or None),
                )

            cur.execute(f"SELECT {_COLUMNS} FROM payroll WHERE payroll_id=%s", (payroll_id,))
            return _to_payroll(fetchone(cur), self._details(cur, payroll_id))

    def delete_for_period(self, employee_id: int, month: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payroll WHERE employee_id=%s AND month=%s AND year=%s",
                (int(employee_id), int(month), int(year)),
            )
            return cur.rowcount > 0

    def list_for_period(self, month: int, year: int, is_paid: Optional[bool] = None) -> Sequence[Payroll]:
        sql = f"SELECT {_COLUMNS} FROM payroll WHERE month=%s AND year=%s"
        params: tuple = (int(month), int(year))
        if is_paid is not None:
            sql += " AND is_paid=%s"
            params += (int(is_paid),)
        sql += " ORDER BY employee_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_payroll(r) for r in fetchall(cur)]

    def record_payment(self, payment: PayrollPayment) -> bool:
        changes: Dict[str, Any] = {}
        guards = []
        if payment.pays_hand:
            changes["is_paid_hand"] = 1
            changes["hand_payment_date"] = payment.payment_date
            guards.append("is_paid_hand=0")
        if payment.pays_bank:
            changes["is_paid_bank"] = 1
            changes["bank_payment_date"] = payment.payment_date
            guards.append("is_paid_bank=0")
        changes["payment_method"] = payment.payment_method
        changes["payment_reference"] = payment.payment_reference
        assert_no_derived_columns(changes)

        assignments = ", ".join(f"{c}=%s" for c in changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payroll SET {assignments} WHERE payroll_id=%s AND {' AND '.join(guards)}",
                (*changes.values(), int(payment.payroll_id)),
            )
            if cur.rowcount == 0:
                return False
            cur.execute(
                """
                INSERT INTO payroll_payments(
                    payroll_id, employee_id, channel, amount, payment_date, payment_method, payment_reference
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(payment.payroll_id),
                    int(payment.employee_id),
                    payment.channel.value,
                    round_money(payment.amount),
                    payment.payment_date,
                    payment.payment_method,
                    payment.payment_reference,
                ),
            )
            return True

    def list_payments(self, payroll_id: int) -> Sequence[PayrollPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payment_id, payroll_id, employee_id, channel, amount, payment_date,
                       payment_method, payment_reference
                FROM payroll_payments
                WHERE payroll_id=%s
                ORDER BY payment_date DESC, payment_id DESC
                """,
                (int(payroll_id),),
            )
            return [
                PayrollPayment(
                    payment_id=int(r["payment_id"]),
                    payroll_id=int(r["payroll_id"]),
                    employee_id=int(r["employee_id"]),
                    channel=PaymentChannel(r["channel"]),
                    amount=to_decimal(r.get("amount")),
                    payment_date=normalize_mysql_date(r["payment_date"]),
                    payment_method=r["payment_method"],
                    payment_reference=r.get("payment_reference"),
                )
                for r in fetchall(cur)
            ]
