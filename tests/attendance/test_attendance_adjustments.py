from datetime import date
from decimal import Decimal

from src.backoffice_payroll.backoffice_payroll.attendance.adjustments import AttendanceAdjustmentCalculator
from src.backoffice_payroll.backoffice_payroll.attendance.factory import AdjustmentRuleFactory
from src.backoffice_payroll.backoffice_payroll.attendance.model import AttendanceRecord
from src.backoffice_payroll.backoffice_payroll.core.enums import AdjustmentKind

DAY = date(2024, 3, 4)


def _day(**kwargs) -> AttendanceRecord:
    return AttendanceRecord(work_date=kwargs.pop("work_date", DAY), **kwargs)


def test_unjustified_absence_deducts_one_daily_rate():
    calc = AttendanceAdjustmentCalculator()
    deductions, additions = calc.compute_adjustments([_day(is_absent=True)], Decimal("30000"))

    assert additions == []
    assert len(deductions) == 1
    assert deductions[0].amount == Decimal("1000")
    assert deductions[0].concept == "Unjustified Absence"
    assert deductions[0].kind == AdjustmentKind.DEDUCTION


def test_justified_or_holiday_absence_is_not_deducted():
    calc = AttendanceAdjustmentCalculator()
    records = [
        _day(is_absent=True, is_justified=True),
        _day(is_absent=True, is_holiday=True, work_date=date(2024, 3, 5)),
    ]
    deductions, additions = calc.compute_adjustments(records, Decimal("30000"))
    assert deductions == []
    assert additions == []


def test_late_minutes_are_charged_at_minute_rate():
    calc = AttendanceAdjustmentCalculator()
    assert calc.minute_rate(Decimal("28800")) == Decimal("2")

    deductions, _ = calc.compute_adjustments([_day(late_minutes=60)], Decimal("28800"))
    assert [d.amount for d in deductions] == [Decimal("120")]
    assert deductions[0].concept == "Late Arrival"


def test_early_departure_is_charged_at_minute_rate():
    calc = AttendanceAdjustmentCalculator()
    deductions, _ = calc.compute_adjustments([_day(early_departure_minutes=15)], Decimal("28800"))
    assert [(d.concept, d.amount) for d in deductions] == [("Early Departure", Decimal("30"))]


def test_overtime_threshold_and_cap():
    calc = AttendanceAdjustmentCalculator()
    base = Decimal("28800")

    _, under = calc.compute_adjustments([_day(extra_minutes=29)], base)
    _, at = calc.compute_adjustments([_day(extra_minutes=30)], base)
    _, over = calc.compute_adjustments([_day(extra_minutes=300)], base)

    assert under == []
    assert [a.amount for a in at] == [Decimal("90.0")]
    # 300 minutes count as 240
    assert [a.amount for a in over] == [Decimal("720.0")]
    assert over[0].notes == "240 extra minutes"


def test_holiday_worked_pays_daily_rate_times_multiplier():
    calc = AttendanceAdjustmentCalculator()
    _, additions = calc.compute_adjustments([_day(is_holiday=True)], Decimal("30000"))
    assert [(a.concept, a.amount) for a in additions] == [("Holiday Worked", Decimal("2000.0"))]


def test_rules_are_additive_on_the_same_day():
    calc = AttendanceAdjustmentCalculator()
    deductions, additions = calc.compute_adjustments(
        [_day(late_minutes=10, extra_minutes=45)],
        Decimal("28800"),
    )
    assert [d.concept for d in deductions] == ["Late Arrival"]
    assert [a.concept for a in additions] == ["Overtime"]


def test_adjustments_are_idempotent_and_never_negative():
    calc = AttendanceAdjustmentCalculator()
    records = [
        _day(is_absent=True),
        _day(late_minutes=7, work_date=date(2024, 3, 5)),
        _day(extra_minutes=100, is_holiday=True, work_date=date(2024, 3, 6)),
        _day(work_date=date(2024, 3, 7)),
    ]

    first = calc.compute_adjustments(records, Decimal("31000"))
    second = calc.compute_adjustments(records, Decimal("31000"))
    assert first == second
    assert all(a.amount >= 0 for group in first for a in group)


def test_zero_salary_produces_zero_amounts():
    calc = AttendanceAdjustmentCalculator()
    deductions, additions = calc.compute_adjustments([_day(is_absent=True), _day(is_holiday=True)], Decimal("0"))
    assert all(a.amount == 0 for a in deductions + additions)


def test_factory_limits_feed_overtime_rule():
    rules = AdjustmentRuleFactory(min_overtime_minutes=60, max_overtime_minutes=90).build()
    calc = AttendanceAdjustmentCalculator(rules=rules)

    _, none = calc.compute_adjustments([_day(extra_minutes=45)], Decimal("28800"))
    _, capped = calc.compute_adjustments([_day(extra_minutes=200)], Decimal("28800"))
    assert none == []
    assert capped[0].amount == Decimal("270.0")
