from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Protocol, Sequence

from ..common.money import round_money
from .model import Liquidation, LiquidationPayment


def liquidation_write_row(liq: Liquidation) -> Dict[str, Any]:
    """Column values for an insert/update of a liquidation; amounts rounded to cents."""
    return {
        "employee_id": int(liq.employee_id),
        "termination_date": liq.termination_date,
        "worked_days": int(liq.worked_days),
        "worked_months": int(liq.worked_months),
        "days_to_pay_in_last_month": int(liq.days_to_pay_in_last_month),
        "base_salary": round_money(liq.base_salary),
        "last_month_payment": round_money(liq.last_month_payment),
        "proportional_vacation": round_money(liq.proportional_vacation),
        "proportional_bonus": round_money(liq.proportional_bonus),
        "compensation_amount": round_money(liq.compensation_amount),
        "total_amount": round_money(liq.total_amount),
        "include_vacation": int(liq.include_vacation),
        "include_bonus": int(liq.include_bonus),
        "is_paid": int(liq.is_paid),
        "payment_date": liq.payment_date,
        "payment_method": liq.payment_method,
        "version": int(liq.version),
        "previous_version_id": liq.previous_version_id,
        "is_superseded": int(liq.is_superseded),
    }


class LiquidationRepository(Protocol):
    """Repository interface for liquidations.

    Every write that can race with another writer is conditional on the row's
    ``version`` and on it still being unpaid; it reports whether it applied.
    """

    def get_by_id(self, liquidation_id: int) -> Optional[Liquidation]:
        raise NotImplementedError

    def get_active_for_employee(self, employee_id: int) -> Optional[Liquidation]:
        """Latest non-superseded liquidation of an employee."""

        raise NotImplementedError

    def list_pending(self) -> Sequence[Liquidation]:
        raise NotImplementedError

    def insert(self, liquidation: Liquidation) -> Liquidation:
        raise NotImplementedError

    def update_if_version(self, liquidation: Liquidation, expected_version: int) -> bool:
        """Overwrite calculation fields and ``version`` of an unpaid row still at ``expected_version``."""

        raise NotImplementedError

    def supersede(self, new_version: Liquidation, expected_version: int) -> Optional[Liquidation]:
        """Atomically mark ``new_version.previous_version_id`` superseded and insert ``new_version``.

        Returns None when the previous row moved past ``expected_version`` or was paid.
        """

        raise NotImplementedError

    def update_inclusions(
        self,
        liquidation_id: int,
        *,
        include_vacation: bool,
        include_bonus: bool,
        total_amount: Decimal,
        expected_version: int,
    ) -> bool:
        raise NotImplementedError

    def record_payment(self, payment: LiquidationPayment, method: str) -> bool:
        """Insert the payment history row and mark the liquidation paid, in one transaction.

        Returns False (and writes nothing) when the liquidation is already paid.
        """

        raise NotImplementedError

    def list_payments(self, liquidation_id: Optional[int] = None) -> Sequence[LiquidationPayment]:
        """Payment history rows, newest first; restricted to one liquidation when given."""

        raise NotImplementedError
