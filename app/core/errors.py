"""Application-level exception types.

Domain errors raised by services/adapters. The HTTP layer maps each type to a
status code in app.core.exception_handlers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    field: str
    retry_after_ms: int
    retry_after_seconds: int
    scope: str
    request_id: str
    errors: list[dict[str, Any]]
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class AuthenticationAppError(AppError):
    """Raised when credentials are missing or wrong."""


class ConflictAppError(AppError):
    """Raised when a resource already exists (e.g., duplicate email)."""


@dataclass
class RateLimitedAppError(AppError):
    """Raised when an IP or account has too many recent attempts.

    Attributes:
        retry_after_ms: Milliseconds until the caller may try again.
    """

    retry_after_ms: int = 0

    @property
    def retry_after_seconds(self) -> int:
        """Retry delay rounded up to whole seconds (Retry-After header value)."""
        return max(0, math.ceil(self.retry_after_ms / 1000))
