from abc import ABC, abstractmethod

from cis_provider.schemas.cis import RateLimitRecord


class AbstractRateLimitClient(ABC):
    """Interface for clients of the Internet Services rate limit API.

    Implementations raise :class:`CISNotFoundError` when the rule (or its
    zone/instance) does not exist and :class:`CISAPIError` for any other
    failure.
    """

    @abstractmethod
    async def create_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        record: RateLimitRecord,
    ) -> RateLimitRecord:
        """Create a rule in the zone and return it as stored remotely."""
        ...

    @abstractmethod
    async def get_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
    ) -> RateLimitRecord:
        """Fetch a single rule."""
        ...

    @abstractmethod
    async def update_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
        record: RateLimitRecord,
    ) -> RateLimitRecord:
        """Replace a rule and return it as stored remotely."""
        ...

    @abstractmethod
    async def delete_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
    ) -> None:
        """Delete a rule."""
        ...

    async def aclose(self) -> None:
        """Release any underlying connections."""
        return None
