"""
Custom exceptions for the client.
"""

from typing import Any, Optional


class QuickPlanError(Exception):
    """Base exception for quickplan."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(QuickPlanError):
    """Local input validation failed (no request was sent)."""

    pass


class TransportError(QuickPlanError):
    """The request never got a response (unreachable, timeout)."""

    pass


class ApiError(QuickPlanError):
    """The backend answered, but reported a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.status_code = status_code


class HttpStatusError(ApiError):
    """Non-2xx HTTP status."""

    pass


class DataIntegrityError(QuickPlanError):
    """The backend returned a structurally invalid record."""

    pass


class TimeParseError(DataIntegrityError):
    """A time-of-day value matched none of the accepted formats."""

    def __init__(self, raw_value: str, attempts: int):
        super().__init__(
            f"Unparsable time value: {raw_value!r}",
            details={"raw_value": raw_value, "attempts": attempts},
        )
        self.raw_value = raw_value
        self.attempts = attempts


class InfrastructureError(QuickPlanError):
    """Local storage failure."""

    pass
