"""Route dependencies.

The API client is created lazily on first use and cached for the lifetime
of the process so connections are pooled across requests. Tests override
:func:`get_rate_limit_resource` through ``app.dependency_overrides``.
"""

from __future__ import annotations

from cis_provider.adapters.cis.base import AbstractRateLimitClient
from cis_provider.adapters.cis.factory import create_cis_client
from cis_provider.resources.rate_limit.resource import RateLimitResource

_client: AbstractRateLimitClient | None = None


def get_cis_client() -> AbstractRateLimitClient:
    """Return the process-wide rate limit API client."""

    global _client

    if _client is None:
        _client = create_cis_client()
    return _client


async def close_cis_client() -> None:
    """Close the cached client, if one was created."""

    global _client

    if _client is not None:
        await _client.aclose()
        _client = None


def get_rate_limit_resource() -> RateLimitResource:
    return RateLimitResource(get_cis_client())
