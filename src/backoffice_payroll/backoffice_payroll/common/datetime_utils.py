from __future__ import annotations

import calendar
import re
from datetime import date, datetime

from ..core.exceptions import ValidationError

_PERIOD_RE = re.compile(r"^\d{4}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_period(value: str) -> tuple[int, int]:
    """Parse a YYYY-MM payroll period into (month, year)."""
    v = (value or "").strip()
    if not _PERIOD_RE.match(v):
        raise ValidationError("Period must use the YYYY-MM format")
    year, month = (int(p) for p in v.split("-"))
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month in period {v!r}")
    return month, year


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()
