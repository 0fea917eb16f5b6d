"""Internet Services API adapter layer."""

from cis_provider.adapters.cis.base import AbstractRateLimitClient
from cis_provider.adapters.cis.exceptions import (
    CISAPIError,
    CISInvalidResponseError,
    CISNotFoundError,
    CISUnavailableError,
)
from cis_provider.adapters.cis.factory import create_cis_client
from cis_provider.adapters.cis.http_client import CISHttpClient
from cis_provider.adapters.cis.in_memory import InMemoryRateLimitClient

__all__ = [
    "AbstractRateLimitClient",
    "CISAPIError",
    "CISHttpClient",
    "CISInvalidResponseError",
    "CISNotFoundError",
    "CISUnavailableError",
    "InMemoryRateLimitClient",
    "create_cis_client",
]
