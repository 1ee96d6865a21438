"""In-memory repositories shared by the service tests."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date
from decimal import Decimal

from src.backoffice_payroll.backoffice_payroll.core.enums import EmployeeStatus
from src.backoffice_payroll.backoffice_payroll.employees.model import Employee
from src.backoffice_payroll.backoffice_payroll.liquidations.model import Liquidation, LiquidationPayment
from src.backoffice_payroll.backoffice_payroll.payroll.model import LatestPayrollSalary, Payroll, PayrollPayment
from src.backoffice_payroll.backoffice_payroll.payroll.repository import payroll_write_row


def employee(employee_id, *, hand="20000", bank="10000", status=EmployeeStatus.ACTIVE, **kwargs) -> Employee:
    return Employee(
        employee_id=employee_id,
        first_name=f"Emp{employee_id}",
        last_name="Test",
        status=status,
        hand_salary=Decimal(hand),
        bank_salary=Decimal(bank),
        **kwargs,
    )


class FakeEmployeesRepo:
    def __init__(self, employees=()):
        self._by_id = {e.employee_id: e for e in employees}
        self.salary_calls = 0

    def put(self, e: Employee) -> None:
        self._by_id[e.employee_id] = e

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def fetch_salary_fields(self, employee_id):
        self.salary_calls += 1
        e = self._by_id.get(int(employee_id))
        return e.salary() if e else None

    def list_active_ids(self):
        return sorted(i for i, e in self._by_id.items() if e.status == EmployeeStatus.ACTIVE)

    def list_terminated(self):
        return [e for e in self._by_id.values() if e.status == EmployeeStatus.INACTIVE]


class FakeAttendanceRepo:
    def __init__(self, records_by_employee=None, *, fail_for=()):
        self.records = dict(records_by_employee or {})
        self._fail_for = set(fail_for)

    def fetch_attendance(self, employee_id, start_date, end_date):
        if int(employee_id) in self._fail_for:
            raise RuntimeError(f"attendance unavailable for {employee_id}")
        return [r for r in self.records.get(int(employee_id), []) if start_date <= r.work_date <= end_date]


class FakePayrollRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, Payroll] = {}
        self._lock = threading.Lock()
        self.latest_override: dict[int, LatestPayrollSalary] = {}
        self.written_rows: list[dict] = []
        self.period_lookups = 0
        self.payments: list[PayrollPayment] = []

    def get_by_id(self, payroll_id):
        return self._rows.get(int(payroll_id))

    def get_for_period(self, employee_id, month, year):
        self.period_lookups += 1
        return self._find(employee_id, month, year)

    def _find(self, employee_id, month, year):
        for p in self._rows.values():
            if (p.employee_id, p.month, p.year) == (int(employee_id), int(month), int(year)):
                return p
        return None

    def fetch_latest_salary(self, employee_id):
        if int(employee_id) in self.latest_override:
            return self.latest_override[int(employee_id)]
        rows = sorted(
            (p for p in self._rows.values() if p.employee_id == int(employee_id)),
            key=lambda p: (p.year, p.month),
            reverse=True,
        )
        if not rows:
            return None
        return LatestPayrollSalary(base_salary=rows[0].base_salary, bank_salary=rows[0].bank_salary)

    def upsert(self, payroll):
        row = payroll_write_row(payroll)
        with self._lock:
            self.written_rows.append(row)
            existing = self._find(payroll.employee_id, payroll.month, payroll.year)
            if existing is not None:
                saved = replace(
                    payroll,
                    payroll_id=existing.payroll_id,
                    is_paid_hand=existing.is_paid_hand,
                    is_paid_bank=existing.is_paid_bank,
                    hand_payment_date=existing.hand_payment_date,
                    bank_payment_date=existing.bank_payment_date,
                )
            else:
                saved = replace(payroll, payroll_id=self._next_id)
                self._next_id += 1
            self._rows[saved.payroll_id] = saved
            return saved

    def delete_for_period(self, employee_id, month, year):
        with self._lock:
            existing = self._find(employee_id, month, year)
            if existing is None:
                return False
            del self._rows[existing.payroll_id]
            return True

    def list_for_period(self, month, year, is_paid=None):
        rows = [p for p in self._rows.values() if (p.month, p.year) == (int(month), int(year))]
        if is_paid is not None:
            rows = [p for p in rows if p.is_paid == is_paid]
        return sorted(rows, key=lambda p: p.employee_id)

    def record_payment(self, payment):
        p = self._rows.get(int(payment.payroll_id))
        if p is None or (payment.pays_hand and p.is_paid_hand) or (payment.pays_bank and p.is_paid_bank):
            return False
        if payment.pays_hand:
            p = replace(p, is_paid_hand=True, hand_payment_date=payment.payment_date)
        if payment.pays_bank:
            p = replace(p, is_paid_bank=True, bank_payment_date=payment.payment_date)
        self._rows[p.payroll_id] = replace(
            p, payment_method=payment.payment_method, payment_reference=payment.payment_reference
        )
        self.payments.append(replace(payment, payment_id=len(self.payments) + 1))
        return True

    def list_payments(self, payroll_id):
        rows = [p for p in self.payments if p.payroll_id == int(payroll_id)]
        return sorted(rows, key=lambda p: (p.payment_date, p.payment_id), reverse=True)


class FakeLiquidationRepo:
    def __init__(self, rows=()):
        self._next_id = 1
        self._rows: dict[int, Liquidation] = {}
        self.payments: list[tuple[LiquidationPayment, str]] = []
        # Simulates another writer bumping the version between read and write.
        self.concurrent_bump = False
        for r in rows:
            self.insert(r)

    def _race(self, liquidation_id):
        if self.concurrent_bump:
            cur = self._rows[int(liquidation_id)]
            self._rows[cur.liquidation_id] = replace(cur, version=cur.version + 1)
            self.concurrent_bump = False

    def get_by_id(self, liquidation_id):
        return self._rows.get(int(liquidation_id))

    def get_active_for_employee(self, employee_id):
        rows = [r for r in self._rows.values() if r.employee_id == int(employee_id) and not r.is_superseded]
        return max(rows, key=lambda r: r.version) if rows else None

    def list_pending(self):
        return [r for r in self._rows.values() if not r.is_paid and not r.is_superseded]

    def insert(self, liquidation):
        saved = replace(liquidation, liquidation_id=self._next_id)
        self._next_id += 1
        self._rows[saved.liquidation_id] = saved
        return saved

    def update_if_version(self, liquidation, expected_version):
        self._race(liquidation.liquidation_id)
        cur = self._rows.get(int(liquidation.liquidation_id))
        if cur is None or cur.version != expected_version or cur.is_paid:
            return False
        self._rows[cur.liquidation_id] = replace(
            liquidation,
            is_paid=cur.is_paid,
            payment_date=cur.payment_date,
            payment_method=cur.payment_method,
            include_vacation=cur.include_vacation,
            include_bonus=cur.include_bonus,
        )
        return True

    def supersede(self, new_version, expected_version):
        self._race(new_version.previous_version_id)
        cur = self._rows.get(int(new_version.previous_version_id))
        if cur is None or cur.version != expected_version or cur.is_paid or cur.is_superseded:
            return None
        self._rows[cur.liquidation_id] = replace(cur, is_superseded=True)
        return self.insert(new_version)

    def update_inclusions(self, liquidation_id, *, include_vacation, include_bonus, total_amount, expected_version):
        cur = self._rows.get(int(liquidation_id))
        if cur is None or cur.version != expected_version or cur.is_paid:
            return False
        self._rows[cur.liquidation_id] = replace(
            cur,
            include_vacation=include_vacation,
            include_bonus=include_bonus,
            total_amount=total_amount,
            version=cur.version + 1,
        )
        return True

    def record_payment(self, payment, method):
        cur = self._rows.get(int(payment.liquidation_id))
        if cur is None or cur.is_paid:
            return False
        self._rows[cur.liquidation_id] = replace(
            cur, is_paid=True, payment_date=payment.payment_date, payment_method=method
        )
        self.payments.append((payment, method))
        return True

    def list_payments(self, liquidation_id=None):
        rows = [p for p, _ in self.payments if liquidation_id is None or p.liquidation_id == int(liquidation_id)]
        return sorted(rows, key=lambda p: p.payment_date, reverse=True)


def liquidation(employee_id=1, *, version=1, is_paid=False, total="1000", **kwargs) -> Liquidation:
    values = dict(
        employee_id=employee_id,
        termination_date=date(2024, 3, 15),
        worked_days=100,
        worked_months=3,
        days_to_pay_in_last_month=15,
        base_salary=Decimal("30000"),
        last_month_payment=Decimal("0"),
        proportional_vacation=Decimal("0"),
        proportional_bonus=Decimal("0"),
        compensation_amount=Decimal("0"),
        total_amount=Decimal(total),
        version=version,
        is_paid=is_paid,
    )
    values.update(kwargs)
    return Liquidation(**values)
