"""Example: use the service layer directly (no Flask).

Controllers are thin; the payroll and liquidation rules live in the services.
"""

import importlib
import sys

from dotenv import load_dotenv

from config import get_settings_module

from src.backoffice_payroll.backoffice_payroll.common.datetime_utils import parse_period
from src.backoffice_payroll.backoffice_payroll.container import build_container
from src.backoffice_payroll.backoffice_payroll.main import configure_logging


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=settings.DB_CONFIG, salary_overrides=getattr(settings, "SALARY_CONFIG", None))

    period = sys.argv[1] if len(sys.argv) > 1 else "2024-03"
    month, year = parse_period(period)
    employee_ids = container.employees_repo.list_active_ids()

    for result in container.payroll_batch.generate_for_period(employee_ids, month, year):
        if result.success:
            print(result.employee_id, "total:", result.payroll.total_salary, "warnings:", list(result.warnings))
        else:
            print(result.employee_id, "failed:", result.error)

    summary = container.liquidation_service.generate_for_terminated()
    print("liquidations:", summary)


if __name__ == "__main__":
    main()
