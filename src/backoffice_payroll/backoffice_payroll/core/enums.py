from __future__ import annotations

from enum import Enum


class AdjustmentKind(str, Enum):
    """Direction of a salary adjustment line."""

    DEDUCTION = "deduction"
    ADDITION = "addition"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PaymentChannel(str, Enum):
    """Which half of a payroll is being paid (cash in hand, bank transfer or both)."""

    HAND = "hand"
    BANK = "bank"
    BOTH = "both"


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"
    CHECK = "check"


class RegenerationMode(str, Enum):
    """How a liquidation regeneration is written back.

    IN_PLACE overwrites the same row; NEW_VERSION appends a row linked to the old one.
    """

    IN_PLACE = "in_place"
    NEW_VERSION = "new_version"
