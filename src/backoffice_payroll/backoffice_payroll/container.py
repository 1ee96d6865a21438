from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.adjustments import AttendanceAdjustmentCalculator
from .attendance.factory import AdjustmentRuleFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .common.cache import LookupCache
from .core.constants import DEFAULT_BATCH_SIZE, DEFAULT_CACHE_TTL_SECONDS
from .core.enums import RegenerationMode
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .liquidations.calculator import LiquidationCalculator
from .liquidations.mysql_liquidation_repository import MySQLLiquidationRepository
from .liquidations.regeneration import LiquidationRegenerationWorkflow
from .liquidations.service import LiquidationService
from .payroll.batch import PayrollBatchOrchestrator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .salary.config import SalaryConfig, create_salary_config, require_valid_config


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    salary_config: SalaryConfig

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    payrolls_repo: MySQLPayrollRepository
    liquidations_repo: MySQLLiquidationRepository

    payroll_service: PayrollService
    payroll_batch: PayrollBatchOrchestrator
    regeneration_workflow: LiquidationRegenerationWorkflow
    liquidation_service: LiquidationService


def build_container(
    *,
    db_config: dict,
    salary_overrides: Optional[dict[str, Any]] = None,
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
    batch_size: int = DEFAULT_BATCH_SIZE,
    regeneration_mode: str = RegenerationMode.IN_PLACE.value,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    salary_config = require_valid_config(create_salary_config(**(salary_overrides or {})))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)
    liquidations_repo = MySQLLiquidationRepository(conn)

    payroll_service = PayrollService(
        employees_repo,
        attendance_repo,
        payrolls_repo,
        adjustments=AttendanceAdjustmentCalculator(salary_config, rules=AdjustmentRuleFactory().build()),
        employee_cache=LookupCache(cache_ttl_seconds),
        payroll_cache=LookupCache(cache_ttl_seconds),
    )
    payroll_batch = PayrollBatchOrchestrator(payroll_service, batch_size=batch_size)

    regeneration_workflow = LiquidationRegenerationWorkflow(
        liquidations_repo,
        employees_repo,
        payrolls_repo,
        calculator=LiquidationCalculator(),
        default_mode=RegenerationMode(regeneration_mode),
    )
    liquidation_service = LiquidationService(liquidations_repo, employees_repo, regeneration_workflow)

    return Container(
        conn=conn,
        salary_config=salary_config,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payrolls_repo=payrolls_repo,
        liquidations_repo=liquidations_repo,
        payroll_service=payroll_service,
        payroll_batch=payroll_batch,
        regeneration_workflow=regeneration_workflow,
        liquidation_service=liquidation_service,
    )
