"""Factory for the rate limit API client."""

from cis_provider.adapters.cis.base import AbstractRateLimitClient
from cis_provider.adapters.cis.http_client import CISHttpClient
from cis_provider.adapters.cis.in_memory import InMemoryRateLimitClient
from cis_provider.core.config import settings
from cis_provider.core.errors import ValidationAppError


def create_cis_client() -> AbstractRateLimitClient:
    """Instantiate the rate limit API client selected by ``CIS_BACKEND``.

    Returns:
        AbstractRateLimitClient: Configured client instance.

    Raises:
        ValidationAppError: If backend-specific requirements are not met.
    """
    backend = settings.cis.backend.lower()

    if backend == "memory":
        return InMemoryRateLimitClient()

    if backend == "http":
        if not settings.cis.iam_token:
            raise ValidationAppError(
                code="cis_missing_iam_token",
                message="The http backend requires the CIS_IAM_TOKEN environment variable",
            )
        return CISHttpClient(
            iam_token=settings.cis.iam_token,
            endpoint=settings.cis.endpoint,
            timeout_seconds=settings.cis.timeout_seconds,
        )

    raise ValidationAppError(
        code="cis_unknown_backend",
        message=f"Unknown CIS backend: '{backend}'. Supported backends: http, memory",
    )
