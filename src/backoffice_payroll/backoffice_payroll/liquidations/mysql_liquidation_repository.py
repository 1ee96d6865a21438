from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..common.money import round_money, to_decimal
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Liquidation, LiquidationPayment
from .repository import LiquidationRepository, liquidation_write_row

_COLUMNS = """
    liquidation_id, employee_id, termination_date, worked_days, worked_months,
    days_to_pay_in_last_month, base_salary, last_month_payment, proportional_vacation,
    proportional_bonus, compensation_amount, total_amount, include_vacation, include_bonus,
    is_paid, payment_date, payment_method, version, previous_version_id, is_superseded
"""

# Fields a regeneration may rewrite; identity and payment state are never touched.
_RECALCULATED = (
    "termination_date",
    "worked_days",
    "worked_months",
    "days_to_pay_in_last_month",
    "base_salary",
    "last_month_payment",
    "proportional_vacation",
    "proportional_bonus",
    "compensation_amount",
    "total_amount",
    "version",
)


def _to_payment(r: Dict[str, Any]) -> LiquidationPayment:
    return LiquidationPayment(
        payment_id=int(r["payment_id"]),
        liquidation_id=int(r["liquidation_id"]),
        employee_id=int(r["employee_id"]),
        amount=to_decimal(r.get("amount")),
        payment_date=normalize_mysql_date(r["payment_date"]),
        concept=r.get("concept") or "",
        notes=r.get("notes"),
    )


def _to_liquidation(r: Dict[str, Any]) -> Liquidation:
    previous = r.get("previous_version_id")
    return Liquidation(
        liquidation_id=int(r["liquidation_id"]),
        employee_id=int(r["employee_id"]),
        termination_date=normalize_mysql_date(r["termination_date"]),
        worked_days=int(r.get("worked_days") or 0),
        worked_months=int(r.get("worked_months") or 0),
        days_to_pay_in_last_month=int(r.get("days_to_pay_in_last_month") or 0),
        base_salary=to_decimal(r.get("base_salary")),
        last_month_payment=to_decimal(r.get("last_month_payment")),
        proportional_vacation=to_decimal(r.get("proportional_vacation")),
        proportional_bonus=to_decimal(r.get("proportional_bonus")),
        compensation_amount=to_decimal(r.get("compensation_amount")),
        total_amount=to_decimal(r.get("total_amount")),
        include_vacation=bool(r.get("include_vacation")),
        include_bonus=bool(r.get("include_bonus")),
        is_paid=bool(r.get("is_paid")),
        payment_date=normalize_mysql_date(r.get("payment_date")),
        payment_method=r.get("payment_method"),
        version=int(r.get("version") or 1),
        previous_version_id=int(previous) if previous is not None else None,
        is_superseded=bool(r.get("is_superseded")),
    )


class MySQLLiquidationRepository(LiquidationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, liquidation_id: int) -> Optional[Liquidation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM liquidations WHERE liquidation_id=%s", (int(liquidation_id),))
            r = fetchone(cur)
            return _to_liquidation(r) if r else None

    def get_active_for_employee(self, employee_id: int) -> Optional[Liquidation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM liquidations
                WHERE employee_id=%s AND is_superseded=0
                ORDER BY version DESC, liquidation_id DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_liquidation(r) if r else None

    def list_pending(self) -> Sequence[Liquidation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM liquidations
                WHERE is_paid=0 AND is_superseded=0
                ORDER BY termination_date DESC
                """
            )
            return [_to_liquidation(r) for r in fetchall(cur)]

    def _insert(self, cur, liquidation: Liquidation) -> Liquidation:
        row = liquidation_write_row(liquidation)
        columns = list(row)
        cur.execute(
            f"INSERT INTO liquidations ({', '.join(columns)}) VALUES ({', '.join(['%s'] * len(columns))})",
            tuple(row[c] for c in columns),
        )
        new_id = int(cur.lastrowid)
        cur.execute(f"SELECT {_COLUMNS} FROM liquidations WHERE liquidation_id=%s", (new_id,))
        return _to_liquidation(fetchone(cur))

    def insert(self, liquidation: Liquidation) -> Liquidation:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._insert(cur, liquidation)

    def update_if_version(self, liquidation: Liquidation, expected_version: int) -> bool:
        row = liquidation_write_row(liquidation)
        assignments = ", ".join(f"{c}=%s" for c in _RECALCULATED)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE liquidations
                SET {assignments}
                WHERE liquidation_id=%s AND version=%s AND is_paid=0
                """,
                (*(row[c] for c in _RECALCULATED), int(liquidation.liquidation_id), int(expected_version)),
            )
            return cur.rowcount > 0

    def supersede(self, new_version: Liquidation, expected_version: int) -> Optional[Liquidation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE liquidations
                SET is_superseded=1
                WHERE liquidation_id=%s AND version=%s AND is_paid=0 AND is_superseded=0
                """,
                (int(new_version.previous_version_id), int(expected_version)),
            )
            if cur.rowcount == 0:
                return None
            return self._insert(cur, new_version)

    def update_inclusions(
        self,
        liquidation_id: int,
        *,
        include_vacation: bool,
        include_bonus: bool,
        total_amount: Decimal,
        expected_version: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE liquidations
                SET include_vacation=%s, include_bonus=%s, total_amount=%s, version=version + 1
                WHERE liquidation_id=%s AND version=%s AND is_paid=0
                """,
                (
                    int(include_vacation),
                    int(include_bonus),
                    round_money(total_amount),
                    int(liquidation_id),
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0

    def record_payment(self, payment: LiquidationPayment, method: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE liquidations
                SET is_paid=1, payment_date=%s, payment_method=%s
                WHERE liquidation_id=%s AND is_paid=0
                """,
                (payment.payment_date, method, int(payment.liquidation_id)),
            )
            if cur.rowcount == 0:
                return False
            cur.execute(
                """
                INSERT INTO liquidation_payments(liquidation_id, employee_id, amount, payment_date, concept, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(payment.liquidation_id),
                    int(payment.employee_id),
                    round_money(payment.amount),
                    payment.payment_date,
                    payment.concept,
                    payment.notes,
                ),
            )
            return True

    def list_payments(self, liquidation_id: Optional[int] = None) -> Sequence[LiquidationPayment]:
        sql = """
            SELECT payment_id, liquidation_id, employee_id, amount, payment_date, concept, notes
            FROM liquidation_payments
        """
        params: tuple = ()
        if liquidation_id is not None:
            sql += " WHERE liquidation_id=%s"
            params = (int(liquidation_id),)
        sql += " ORDER BY payment_date DESC, payment_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_payment(r) for r in fetchall(cur)]
