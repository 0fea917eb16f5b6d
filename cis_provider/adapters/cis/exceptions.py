from typing import Any, Optional


class CISAPIError(Exception):
    """Base exception for failed calls to the Internet Services API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(f"{message} (Status: {status_code})")


class CISNotFoundError(CISAPIError):
    """Raised when the requested rule, zone or instance does not exist (404)."""
    pass


class CISUnavailableError(CISAPIError):
    """Raised on network failures, timeouts and 5xx responses."""
    pass


class CISInvalidResponseError(CISAPIError):
    """Raised when a successful response cannot be mapped to a rate limit record."""
    pass
