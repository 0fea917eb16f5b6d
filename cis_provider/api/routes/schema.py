from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from cis_provider.core.auth import verify_api_key
from cis_provider.resources.identifiers import SEPARATOR
from cis_provider.schemas.rate_limit import TRACKED_FIELDS, RateLimitConfig, RateLimitState

router = APIRouter(
    prefix="/schema",
    tags=["Schema"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("/rate-limit")
def rate_limit_schema() -> dict[str, Any]:
    """Describe the rate limit resource to the engine.

    Returns the JSON schema of the configuration and of the state, the
    fields whose change triggers an update, and the identifier layout used
    for import.
    """

    return {
        "type": "ibm_cis_rate_limit",
        "config": RateLimitConfig.model_json_schema(),
        "state": RateLimitState.model_json_schema(),
        "tracked_fields": list(TRACKED_FIELDS),
        "computed_fields": ["id", "rule_id"],
        "identifier": {
            "separator": SEPARATOR,
            "layout": ["rule_id", "zone_id", "cis_id"],
        },
    }
