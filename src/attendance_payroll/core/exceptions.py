from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``kind`` is the stable identifier exposed to API callers.
    """

    kind = "domain_error"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission or crosses a tenant boundary."""

    kind = "authorization_error"
    http_status = 403


class TemporalPolicyError(DomainError):
    """Raised when a non-privileged principal edits a past date."""

    kind = "temporal_policy"
    http_status = 403


class LockedError(DomainError):
    """Raised when a mutation touches a locked scope."""

    kind = "locked"
    http_status = 423


class InsufficientBalanceError(DomainError):
    kind = "insufficient_balance"

    def __init__(self, leave_type: str, message: Optional[str] = None):
        self.leave_type = str(leave_type)
        super().__init__(message or f"Insufficient {self.leave_type} balance.")


class ConflictError(DomainError):
    """Raised on overlapping shifts or a duplicate record for the same day."""

    kind = "conflict"
    http_status = 409


class NotFoundError(DomainError):
    kind = "not_found"
    http_status = 404


class NoDataError(DomainError):
    kind = "no_data"
    http_status = 404


class ImmutableRecordError(DomainError):
    """Raised when a PAID payroll record would be changed."""

    kind = "immutable_record"
    http_status = 409


class InvalidTransitionError(DomainError):
    kind = "invalid_transition"
    http_status = 409
