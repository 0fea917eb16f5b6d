"""Rate limit rule resource."""

from cis_provider.resources.rate_limit.expand import expand_rate_limit
from cis_provider.resources.rate_limit.flatten import flatten_rate_limit
from cis_provider.resources.rate_limit.resource import RateLimitData, RateLimitResource

__all__ = [
    "RateLimitData",
    "RateLimitResource",
    "expand_rate_limit",
    "flatten_rate_limit",
]
