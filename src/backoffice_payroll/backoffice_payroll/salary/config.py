"""Working-time constants and pay multipliers used by every payroll calculation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any

from ..common.money import to_decimal
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class SalaryConfig:
    overtime_multiplier: Decimal = Decimal("1.5")
    holiday_multiplier: Decimal = Decimal("2.0")
    working_hours_per_day: int = 8
    working_days_per_month: int = 30


DEFAULT_SALARY_CONFIG = SalaryConfig()


def create_salary_config(**overrides: Any) -> SalaryConfig:
    """Merge overrides onto the defaults.

    Nothing is validated here; call ``validate_salary_config`` (or
    ``require_valid_config``) before handing the result to a calculator.
    """
    for key in ("overtime_multiplier", "holiday_multiplier"):
        if key in overrides:
            overrides[key] = to_decimal(overrides[key])
    return replace(DEFAULT_SALARY_CONFIG, **overrides)


def validate_salary_config(config: SalaryConfig) -> list[str]:
    errors: list[str] = []

    if config.overtime_multiplier < 1:
        errors.append(f"overtime_multiplier must be >= 1 (got {config.overtime_multiplier})")

    if config.holiday_multiplier < 1:
        errors.append(f"holiday_multiplier must be >= 1 (got {config.holiday_multiplier})")

    if not 1 <= config.working_hours_per_day <= 24:
        errors.append(f"working_hours_per_day must be between 1 and 24 (got {config.working_hours_per_day})")

    if not 1 <= config.working_days_per_month <= 31:
        errors.append(f"working_days_per_month must be between 1 and 31 (got {config.working_days_per_month})")

    return errors


def require_valid_config(config: SalaryConfig) -> SalaryConfig:
    errors = validate_salary_config(config)
    if errors:
        raise ValidationError("Invalid salary configuration", errors)
    return config
