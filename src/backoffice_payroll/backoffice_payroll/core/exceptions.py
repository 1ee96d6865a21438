from __future__ import annotations

from typing import Any, Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, violations: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.violations = list(violations or [message])


class NotFoundError(DomainError):
    """Raised when an employee, payroll or liquidation does not exist."""


class InvalidStateError(DomainError):
    """Raised when an entity is in a state that forbids the operation (e.g. already paid)."""


class ConcurrencyConflictError(DomainError):
    """Raised when a versioned write lost a race against another writer."""


class InconsistencyError(DomainError):
    """Raised when a reported amount does not match its recomputed value."""

    def __init__(self, field: str, expected: Any, actual: Any):
        super().__init__(f"{field}: expected {expected}, got {actual}")
        self.field = field
        self.expected = expected
        self.actual = actual


class InfrastructureError(Exception):
    """Raised when the datastore call itself fails; callers may retry."""
