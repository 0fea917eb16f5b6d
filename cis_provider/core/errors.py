"""Provider-level exception types.

Errors raised by the resource lifecycle fall into four families:
- validation: bad configuration or malformed identifiers, raised before any
  network call
- not found: the rule is gone remotely (only surfaced where absence is fatal,
  e.g. import)
- remote: any other failure reported by the rate limit API
- invariant: the remote API answered with something unusable
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    field: str
    operation: str
    resource_id: str
    http_status: int
    remote_errors: list[dict[str, Any]]
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for provider failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when resource configuration fails validation."""


class IdentifierFormatError(ValidationAppError):
    """Raised when a composite identifier cannot be encoded or decoded."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class ResourceNotFoundAppError(AppError):
    """Raised when a rule must exist remotely but does not."""


class RemoteAppError(AppError):
    """Raised when the rate limit API fails for a lifecycle operation."""


class InvariantAppError(AppError):
    """Raised when the rate limit API returns an unusable response."""
