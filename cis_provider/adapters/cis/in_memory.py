"""In-process rate limit API (``CIS_BACKEND=memory``).

Notes:
- Per-process only: rules vanish when the provider restarts.
- Thread-safe: uses a lock around shared state.
- Mirrors the remote API's not-found behaviour so lifecycle code paths are
  the same as against the real service.
"""

from __future__ import annotations

import threading
import uuid
from typing import Callable

from cis_provider.adapters.cis.base import AbstractRateLimitClient
from cis_provider.adapters.cis.exceptions import CISNotFoundError
from cis_provider.schemas.cis import Correlate, Match, MatchRequest, RateLimitRecord


def _default_id() -> str:
    return uuid.uuid4().hex


class InMemoryRateLimitClient(AbstractRateLimitClient):
    """Rate limit API backed by a dict keyed by (instance, zone, rule).

    Stored records get the same server-side defaults the remote API applies:
    an empty match request and an empty correlate block.
    """

    def __init__(self, *, id_factory: Callable[[], str] = _default_id) -> None:
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._records: dict[tuple[str, str, str], RateLimitRecord] = {}

    def _key(self, instance_id: str, zone_id: str, rule_id: str) -> tuple[str, str, str]:
        return instance_id, zone_id, rule_id

    @staticmethod
    def _with_defaults(record: RateLimitRecord, rule_id: str) -> RateLimitRecord:
        stored = record.model_copy(deep=True, update={"id": rule_id})
        if stored.match is None:
            stored.match = Match(request=MatchRequest(url="*"))
        elif stored.match.request is None:
            stored.match.request = MatchRequest(url="*")
        if stored.correlate is None:
            stored.correlate = Correlate()
        return stored

    def _get(self, instance_id: str, zone_id: str, rule_id: str) -> RateLimitRecord:
        record = self._records.get(self._key(instance_id, zone_id, rule_id))
        if record is None:
            raise CISNotFoundError(
                f"rate limit {rule_id} not found in zone {zone_id}",
                status_code=404,
            )
        return record

    async def create_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        record: RateLimitRecord,
    ) -> RateLimitRecord:
        with self._lock:
            rule_id = self._id_factory()
            stored = self._with_defaults(record, rule_id)
            self._records[self._key(instance_id, zone_id, rule_id)] = stored
            return stored.model_copy(deep=True)

    async def get_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
    ) -> RateLimitRecord:
        with self._lock:
            return self._get(instance_id, zone_id, rule_id).model_copy(deep=True)

    async def update_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
        record: RateLimitRecord,
    ) -> RateLimitRecord:
        with self._lock:
            self._get(instance_id, zone_id, rule_id)
            stored = self._with_defaults(record, rule_id)
            self._records[self._key(instance_id, zone_id, rule_id)] = stored
            return stored.model_copy(deep=True)

    async def delete_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
    ) -> None:
        with self._lock:
            self._get(instance_id, zone_id, rule_id)
            del self._records[self._key(instance_id, zone_id, rule_id)]
