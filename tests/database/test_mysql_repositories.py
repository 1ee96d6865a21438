from datetime import date
from decimal import Decimal

import mysql.connector
import pytest

from src.backoffice_payroll.backoffice_payroll.core.enums import PaymentChannel
from src.backoffice_payroll.backoffice_payroll.core.exceptions import InfrastructureError
from src.backoffice_payroll.backoffice_payroll.database.mysql_base import db_cursor
from src.backoffice_payroll.backoffice_payroll.liquidations.mysql_liquidation_repository import (
    MySQLLiquidationRepository,
)
from src.backoffice_payroll.backoffice_payroll.liquidations.model import LiquidationPayment
from src.backoffice_payroll.backoffice_payroll.liquidations.repository import liquidation_write_row
from src.backoffice_payroll.backoffice_payroll.payroll.model import PayrollPayment
from src.backoffice_payroll.backoffice_payroll.payroll.mysql_payroll_repository import MySQLPayrollRepository
from tests.fakes import liquidation


class FakeCursor:
    def __init__(self, rowcounts=(), fail=False):
        self.executed = []
        self._rowcounts = list(rowcounts)
        self._fail = fail
        self.rowcount = 0
        self.lastrowid = None

    def execute(self, sql, params=None):
        if self._fail:
            raise mysql.connector.Error("boom")
        self.executed.append((" ".join(sql.split()), params))
        self.rowcount = self._rowcounts.pop(0) if self._rowcounts else 1

    def fetchone(self):
        return None

    def fetchall(self):
        return []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, cursor):
        self.conn = FakeConnection(cursor)

    def connect(self, *, with_database=True):
        return self.conn


def test_db_cursor_wraps_connector_errors_and_rolls_back():
    factory = FakeConnFactory(FakeCursor(fail=True))
    with pytest.raises(InfrastructureError):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")
    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_payroll_payment_sets_flags_and_history_without_writing_is_paid():
    cursor = FakeCursor()
    factory = FakeConnFactory(cursor)
    payment = PayrollPayment(
        payroll_id=5,
        employee_id=2,
        channel=PaymentChannel.HAND,
        amount=Decimal("20000.005"),
        payment_date=date(2024, 4, 1),
        payment_method="cash",
    )

    assert MySQLPayrollRepository(factory).record_payment(payment)

    sql, params = cursor.executed[0]
    assert sql == (
        "UPDATE payroll SET is_paid_hand=%s, hand_payment_date=%s, payment_method=%s, payment_reference=%s "
        "WHERE payroll_id=%s AND is_paid_hand=0"
    )
    assert params == (1, date(2024, 4, 1), "cash", None, 5)
    sql, params = cursor.executed[1]
    assert sql.startswith("INSERT INTO payroll_payments(")
    assert params == (5, 2, "hand", Decimal("20000.01"), date(2024, 4, 1), "cash", None)
    assert factory.conn.committed


def test_payroll_payment_on_paid_channel_writes_no_history():
    cursor = FakeCursor(rowcounts=[0])
    payment = PayrollPayment(
        payroll_id=5,
        employee_id=2,
        channel=PaymentChannel.BOTH,
        amount=Decimal("30000"),
        payment_date=date(2024, 4, 1),
        payment_method="transfer",
        payment_reference="R-1",
    )

    assert MySQLPayrollRepository(FakeConnFactory(cursor)).record_payment(payment) is False

    assert len(cursor.executed) == 1
    assert cursor.executed[0][0].endswith("WHERE payroll_id=%s AND is_paid_hand=0 AND is_paid_bank=0")


def test_list_for_period_filters_on_generated_is_paid():
    cursor = FakeCursor()
    repo = MySQLPayrollRepository(FakeConnFactory(cursor))

    assert repo.list_for_period(3, 2024, is_paid=False) == []
    repo.list_for_period(3, 2024)

    filtered, unfiltered = cursor.executed
    assert filtered[0].endswith("WHERE month=%s AND year=%s AND is_paid=%s ORDER BY employee_id")
    assert filtered[1] == (3, 2024, 0)
    assert unfiltered[0].endswith("WHERE month=%s AND year=%s ORDER BY employee_id")
    assert unfiltered[1] == (3, 2024)


def test_update_if_version_is_conditional():
    cursor = FakeCursor(rowcounts=[0])
    repo = MySQLLiquidationRepository(FakeConnFactory(cursor))

    applied = repo.update_if_version(liquidation(version=3, liquidation_id=8), expected_version=2)

    assert applied is False
    sql, params = cursor.executed[0]
    assert "WHERE liquidation_id=%s AND version=%s AND is_paid=0" in sql
    assert params[-2:] == (8, 2)


def test_record_payment_writes_nothing_when_already_paid():
    cursor = FakeCursor(rowcounts=[0])
    repo = MySQLLiquidationRepository(FakeConnFactory(cursor))
    payment = LiquidationPayment(
        liquidation_id=1, employee_id=3, amount=Decimal("10"), payment_date=date(2024, 4, 1), concept="x"
    )

    assert repo.record_payment(payment, "transfer") is False
    assert len(cursor.executed) == 1


def test_liquidation_row_rounds_money():
    row = liquidation_write_row(liquidation(total="100.005", base_salary=Decimal("1234.567")))
    assert row["total_amount"] == Decimal("100.01")
    assert row["base_salary"] == Decimal("1234.57")


def test_liquidation_payment_history_query():
    cursor = FakeCursor()
    repo = MySQLLiquidationRepository(FakeConnFactory(cursor))

    repo.list_payments(4)
    repo.list_payments()

    one, every = cursor.executed
    assert one[0].endswith("FROM liquidation_payments WHERE liquidation_id=%s ORDER BY payment_date DESC, payment_id DESC")
    assert one[1] == (4,)
    assert every[0].endswith("FROM liquidation_payments ORDER BY payment_date DESC, payment_id DESC")
    assert every[1] == ()
