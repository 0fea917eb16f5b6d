"""Lifecycle endpoints driven by the IaC engine.

Identifiers are ``rule_id:zone_id:cis_id``; the CRN in the last component
may contain ``/`` so identifiers are matched as path segments.
"""

from fastapi import APIRouter, Depends, Response, status

from cis_provider.api.deps import get_rate_limit_resource
from cis_provider.core.auth import verify_api_key
from cis_provider.core.errors import InvariantAppError, ResourceNotFoundAppError
from cis_provider.resources.rate_limit.resource import RateLimitData, RateLimitResource
from cis_provider.schemas.rate_limit import (
    ImportRateLimitRequest,
    RateLimitConfig,
    RateLimitState,
    UpdateRateLimitRequest,
)

router = APIRouter(
    prefix="/rate-limits",
    tags=["Rate limits"],
    dependencies=[Depends(verify_api_key)],
)


def _gone(resource_id: str) -> ResourceNotFoundAppError:
    return ResourceNotFoundAppError(
        code="rate_limit_gone",
        message="Rate limit no longer exists",
        details={"resource_id": resource_id},
    )


def _state_of(data: RateLimitData) -> RateLimitState:
    if data.state is None:
        raise InvariantAppError(
            code="rate_limit_state_missing",
            message="Rate limit was written but could not be read back",
            details={"resource_id": data.id},
        )
    return data.state


@router.post("", response_model=RateLimitState, status_code=status.HTTP_201_CREATED)
async def create_rate_limit(
    config: RateLimitConfig,
    resource: RateLimitResource = Depends(get_rate_limit_resource),
) -> RateLimitState:
    """Create a rule and return its state as read back from the API."""
    data = RateLimitData(config=config)
    await resource.create(data)
    return _state_of(data)


@router.post("/import", response_model=RateLimitState)
async def import_rate_limit(
    body: ImportRateLimitRequest,
    resource: RateLimitResource = Depends(get_rate_limit_resource),
) -> RateLimitState:
    """Adopt an existing rule by composite identifier."""
    data = await resource.import_state(body.id)
    return _state_of(data)


@router.head("/{resource_id:path}")
async def rate_limit_exists(
    resource_id: str,
    resource: RateLimitResource = Depends(get_rate_limit_resource),
) -> Response:
    """200 when the rule exists, 404 when it does not."""
    found = await resource.exists(RateLimitData(id=resource_id))
    return Response(status_code=status.HTTP_200_OK if found else status.HTTP_404_NOT_FOUND)


@router.get("/{resource_id:path}", response_model=RateLimitState)
async def read_rate_limit(
    resource_id: str,
    resource: RateLimitResource = Depends(get_rate_limit_resource),
) -> RateLimitState:
    """Read the rule; 404 ``rate_limit_gone`` tells the engine to drop it."""
    data = RateLimitData(id=resource_id)
    await resource.read(data)
    if not data.id:
        raise _gone(resource_id)
    return _state_of(data)


@router.put("/{resource_id:path}", response_model=RateLimitState)
async def update_rate_limit(
    resource_id: str,
    body: UpdateRateLimitRequest,
    resource: RateLimitResource = Depends(get_rate_limit_resource),
) -> RateLimitState:
    """Apply ``config``; only sent to the API if it differs from ``prior``."""
    data = RateLimitData(id=resource_id, config=body.config, prior=body.prior)
    await resource.update(data)
    if not data.id:
        raise _gone(resource_id)
    return _state_of(data)


@router.delete("/{resource_id:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rate_limit(
    resource_id: str,
    resource: RateLimitResource = Depends(get_rate_limit_resource),
) -> Response:
    await resource.delete(RateLimitData(id=resource_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
