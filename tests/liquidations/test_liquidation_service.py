from datetime import date
from decimal import Decimal

import pytest

from src.backoffice_payroll.backoffice_payroll.core.enums import EmployeeStatus
from src.backoffice_payroll.backoffice_payroll.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from src.backoffice_payroll.backoffice_payroll.liquidations.calculator import LiquidationCalculator
from src.backoffice_payroll.backoffice_payroll.liquidations.regeneration import LiquidationRegenerationWorkflow
from src.backoffice_payroll.backoffice_payroll.liquidations.service import LiquidationService
from tests.fakes import FakeEmployeesRepo, FakeLiquidationRepo, FakePayrollRepo, employee, liquidation


def _service(employees, rows=()):
    employees_repo = FakeEmployeesRepo(employees)
    liquidations = FakeLiquidationRepo(rows)
    workflow = LiquidationRegenerationWorkflow(liquidations, employees_repo, FakePayrollRepo())
    return LiquidationService(liquidations, employees_repo, workflow), liquidations


def _gone(employee_id, **kwargs):
    values = dict(hand="40000", bank="20000", hire_date=date(2023, 1, 1), termination_date=date(2024, 3, 15))
    values.update(kwargs)
    return employee(employee_id, status=EmployeeStatus.INACTIVE, **values)


def test_generate_creates_updates_and_skips():
    service, liquidations = _service(
        [
            _gone(1),
            _gone(2),
            _gone(3),
            _gone(4, hire_date=None),
            employee(5),
        ],
        rows=[liquidation(employee_id=2), liquidation(employee_id=3, is_paid=True)],
    )

    summary = service.generate_for_terminated()

    assert (summary.generated, summary.updated, summary.skipped) == (1, 1, 2)
    assert summary.errors == []
    created = liquidations.get_active_for_employee(1)
    assert created.version == 1
    assert created.total_amount == Decimal("104000")
    assert liquidations.get_active_for_employee(2).version == 2
    assert liquidations.get_active_for_employee(3).total_amount == Decimal("1000")


def test_generate_collects_errors_per_employee():
    service, _ = _service([_gone(1, hand="0", bank="0"), _gone(2)])
    summary = service.generate_for_terminated()
    assert summary.generated == 1
    assert len(summary.errors) == 1
    assert summary.errors[0].startswith("Emp1 Test")


def test_set_inclusions_recomputes_total():
    service, _ = _service(
        [_gone(1)],
        rows=[
            liquidation(
                last_month_payment=Decimal("30000"),
                proportional_vacation=Decimal("4000"),
                proportional_bonus=Decimal("10000"),
                compensation_amount=Decimal("60000"),
                total="104000",
            )
        ],
    )

    updated = service.set_inclusions(1, include_vacation=False, include_bonus=True)
    assert updated.total_amount == Decimal("100000")
    assert updated.include_vacation is False
    assert updated.version == 2


def test_set_inclusions_refused_when_paid():
    service, _ = _service([_gone(1)], rows=[liquidation(is_paid=True)])
    with pytest.raises(InvalidStateError):
        service.set_inclusions(1, include_vacation=False, include_bonus=False)


def test_confirm_payment_records_history_once():
    service, liquidations = _service([_gone(1)], rows=[liquidation(total="1500.50")])

    paid = service.confirm_payment(1, paid_on=date(2024, 4, 2), notes="final")

    assert paid.is_paid
    assert paid.payment_date == date(2024, 4, 2)
    assert paid.payment_method == "transfer"
    payment, method = liquidations.payments[0]
    assert payment.amount == Decimal("1500.50")
    assert payment.concept == "Liquidation payment"
    assert method == "transfer"
    assert service.list_pending() == []

    with pytest.raises(InvalidStateError):
        service.confirm_payment(1)
    assert len(liquidations.payments) == 1


def test_confirm_payment_validates_method_and_existence():
    service, _ = _service([_gone(1)], rows=[liquidation()])
    with pytest.raises(ValidationError):
        service.confirm_payment(1, method="bitcoin")
    with pytest.raises(NotFoundError):
        service.confirm_payment(9)


@pytest.mark.parametrize("amount", [Decimal("1e30"), float("inf"), "-5", "lots"])
def test_confirm_payment_rejects_out_of_range_amounts(amount):
    service, liquidations = _service([_gone(1)], rows=[liquidation()])

    with pytest.raises(ValidationError):
        service.confirm_payment(1, amount=amount)

    assert liquidations.payments == []
    assert not liquidations.get_by_id(1).is_paid


def test_explicit_amount_within_cap_is_recorded():
    service, liquidations = _service([_gone(1)], rows=[liquidation()])
    service.confirm_payment(1, amount="750.25", method="cash")
    payment, method = liquidations.payments[0]
    assert payment.amount == Decimal("750.25")
    assert method == "cash"


def test_payment_history_lists_newest_first_and_filters():
    service, _ = _service(
        [_gone(1), _gone(2)], rows=[liquidation(employee_id=1), liquidation(employee_id=2, total="2000")]
    )
    service.confirm_payment(1, paid_on=date(2024, 4, 1))
    service.confirm_payment(2, paid_on=date(2024, 4, 5))

    assert [p.liquidation_id for p in service.payment_history()] == [2, 1]
    only_first = service.payment_history(1)
    assert [(p.liquidation_id, p.amount) for p in only_first] == [(1, Decimal("1000"))]
    with pytest.raises(NotFoundError):
        service.payment_history(9)


def test_inclusions_total_matches_the_calculation_formula():
    service, _ = _service([_gone(1)])
    service.generate_for_terminated()
    calc = LiquidationCalculator().compute(date(2023, 1, 1), date(2024, 3, 15), Decimal("60000"))

    for include_vacation, include_bonus in [(True, False), (False, True), (False, False), (True, True)]:
        updated = service.set_inclusions(1, include_vacation=include_vacation, include_bonus=include_bonus)
        assert updated.total_amount == calc.total_for(include_vacation, include_bonus)
