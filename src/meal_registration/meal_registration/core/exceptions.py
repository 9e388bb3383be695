from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConfigError(DomainError):
    """Raised when stored settings (deadline time, cooking window, ...) cannot be parsed.

    Fatal to the current operation: callers must abort before any write.
    """


class NotFoundError(DomainError):
    """Raised when a referenced tenant or employee does not exist."""


class StoreError(DomainError):
    """Raised when the persistence layer fails a read or write."""


class PartialBatchFailure(DomainError):
    """One or more dates of a bulk operation failed."""

    def __init__(self, result: Any):
        self.result = result
        failed = ", ".join(d.isoformat() for d in sorted(result.failed_dates))
        super().__init__(f"Không thể cập nhật các ngày: {failed}")
