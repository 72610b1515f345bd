from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class QueuePersistenceError(DomainError):
    """Raised when the local submission queue cannot be read or written."""


class GatewayError(DomainError):
    """Raised when the remote attendance API is unreachable or answers with an error."""

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.status = status
