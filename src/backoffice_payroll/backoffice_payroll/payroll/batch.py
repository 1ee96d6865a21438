from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from ..common.validators import require_period
from ..core.constants import DEFAULT_BATCH_SIZE
from ..core.exceptions import DomainError, InfrastructureError
from .model import BatchItemResult
from .service import PayrollService

logger = logging.getLogger(__name__)


class PayrollBatchOrchestrator:
    """Generates a month of payrolls for many employees.

    Employees are processed in fixed-size batches; members of a batch run in
    parallel, batches run one after the other. A failing employee never stops
    the others.
    """

    def __init__(self, payroll_service: PayrollService, *, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._service = payroll_service
        self._batch_size = batch_size

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def generate_for_period(
        self,
        employee_ids: Sequence[int],
        month: int,
        year: int,
        *,
        force_regenerate: bool = False,
    ) -> List[BatchItemResult]:
        month, year = require_period(month, year)
        ids = [int(e) for e in employee_ids]
        logger.info(
            "Payroll batch start period=%02d/%s employees=%s force=%s", month, year, len(ids), force_regenerate
        )

        results: List[BatchItemResult] = []
        for start in range(0, len(ids), self._batch_size):
            chunk = ids[start : start + self._batch_size]
            with ThreadPoolExecutor(max_workers=len(chunk)) as pool:
                results.extend(pool.map(lambda e: self._generate_one(e, month, year, force_regenerate), chunk))

        failed = sum(1 for r in results if not r.success)
        logger.info("Payroll batch done period=%02d/%s ok=%s failed=%s", month, year, len(results) - failed, failed)
        return results

    def _generate_one(self, employee_id: int, month: int, year: int, force_regenerate: bool) -> BatchItemResult:
        try:
            if force_regenerate:
                self._service.delete_for_period(employee_id, month, year)
            elif self._service.existing_for_period(employee_id, month, year) is not None:
                return BatchItemResult(
                    employee_id=employee_id,
                    success=False,
                    error=f"Payroll already generated for {month:02d}/{year}",
                )

            payroll, validation = self._service.generate_with_validation(employee_id, month, year)
            return BatchItemResult(
                employee_id=employee_id,
                success=True,
                payroll=payroll,
                warnings=validation.warnings,
            )
        except (DomainError, InfrastructureError) as exc:
            logger.warning("Payroll generation failed employee=%s: %s", employee_id, exc)
            return BatchItemResult(employee_id=employee_id, success=False, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error generating payroll employee=%s", employee_id)
            return BatchItemResult(employee_id=employee_id, success=False, error=str(exc))
