"""Lifecycle of the rate limit rule resource.

Each operation is a single round trip to the rate limit API (create and
update are followed by a read so the engine state reflects server defaults).
No retries are attempted and nothing is rolled back: once the API accepted a
create or update, the remote rule stays as last written even if the
follow-up read fails.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from cis_provider.adapters.cis.base import AbstractRateLimitClient
from cis_provider.adapters.cis.exceptions import (
    CISAPIError,
    CISInvalidResponseError,
    CISNotFoundError,
)
from cis_provider.core.errors import (
    AppError,
    InvariantAppError,
    RemoteAppError,
    ResourceNotFoundAppError,
    ValidationAppError,
)
from cis_provider.core.logging import operation_context
from cis_provider.resources.base import AbstractResource, ResourceData
from cis_provider.resources.identifiers import decode_domain_id, decode_rule_id, encode_rule_id
from cis_provider.resources.rate_limit.expand import expand_rate_limit
from cis_provider.resources.rate_limit.flatten import flatten_rate_limit
from cis_provider.schemas.rate_limit import TRACKED_FIELDS, RateLimitConfig, RateLimitState

logger = logging.getLogger(__name__)

RateLimitData = ResourceData[RateLimitConfig, RateLimitState]


def _remote_error(operation: str, resource_id: str, exc: CISAPIError) -> AppError:
    """Wrap an API client failure; an unmappable response is an invariant violation."""
    if isinstance(exc, CISInvalidResponseError):
        return InvariantAppError(
            code="rate_limit_unexpected_response",
            message=f"Rate limit returned by the API could not be mapped: {exc.message}",
            details={
                "operation": operation,
                "resource_id": resource_id,
                "remote_errors": exc.errors,
            },
        )
    return RemoteAppError(
        code=f"rate_limit_{operation}_failed",
        message=f"Failed to {operation} rate limit: {exc}",
        details={
            "operation": operation,
            "resource_id": resource_id,
            "http_status": exc.status_code or 0,
            "remote_errors": exc.errors,
        },
    )


def _require_config(data: RateLimitData, operation: str) -> RateLimitConfig:
    if data.config is None:
        raise ValidationAppError(
            code="rate_limit_config_missing",
            message=f"Cannot {operation} a rate limit without a configuration",
            details={"operation": operation},
        )
    return data.config


class RateLimitResource(AbstractResource[RateLimitConfig, RateLimitState]):
    """Manage a rate limit rule through the Internet Services API.

    Attributes:
        client: Rate limit API client.
    """

    def __init__(self, client: AbstractRateLimitClient) -> None:
        self.client = client

    async def create(self, data: RateLimitData) -> None:
        """Create the rule described by ``data.config`` and read it back.

        Raises:
            ValidationAppError: Invalid configuration or domain_id.
            RemoteAppError: The API rejected the create.
            InvariantAppError: The API response carried no rule id.
        """
        with operation_context("create"):
            config = _require_config(data, "create")
            zone_id, _ = decode_domain_id(config.domain_id)
            instance_id = config.cis_id
            record = expand_rate_limit(config)

            try:
                created = await self.client.create_rate_limit(instance_id, zone_id, record)
            except CISAPIError as exc:
                logger.error("rate_limit.create.failed", extra={"zone_id": zone_id, "error": str(exc)})
                raise _remote_error("create", "", exc) from exc

            if not created.id:
                raise InvariantAppError(
                    code="rate_limit_create_missing_id",
                    message="Failed to find record in create response; record id was empty",
                    details={"operation": "create"},
                )

            data.set_id(encode_rule_id(created.id, zone_id, instance_id))
            logger.info("rate_limit.create.success", extra={"resource_id": data.id})

        await self.read(data)

    async def read(self, data: RateLimitData) -> None:
        """Refresh ``data.state`` from the API.

        A rule that no longer exists clears ``data.id`` instead of raising.

        Raises:
            IdentifierFormatError: ``data.id`` is malformed.
            RemoteAppError: Any API failure other than not-found.
            InvariantAppError: The API returned a record that cannot be mapped.
        """
        with operation_context("read", data.id):
            rule_id, zone_id, instance_id = decode_rule_id(data.id)
            try:
                record = await self.client.get_rate_limit(instance_id, zone_id, rule_id)
            except CISNotFoundError:
                logger.warning("rate_limit.read.gone", extra={"resource_id": data.id})
                data.set_id("")
                return
            except CISAPIError as exc:
                raise _remote_error("read", data.id, exc) from exc

            try:
                data.state = flatten_rate_limit(record, rule_id, zone_id, instance_id)
            except ValidationError as exc:
                raise InvariantAppError(
                    code="rate_limit_unexpected_response",
                    message=f"Rate limit returned by the API could not be mapped: {exc.error_count()} invalid field(s)",
                    details={"operation": "read", "resource_id": data.id},
                ) from exc
            logger.debug("rate_limit.read.success")

    async def update(self, data: RateLimitData) -> None:
        """Send the desired configuration when a tracked field changed.

        When nothing tracked changed the API call is skipped and the rule is
        only re-read.

        Raises:
            ValidationAppError: Invalid configuration or identifier.
            RemoteAppError: The API rejected the update.
        """
        with operation_context("update", data.id):
            rule_id, zone_id, instance_id = decode_rule_id(data.id)
            config = _require_config(data, "update")

            if data.has_changes(TRACKED_FIELDS):
                record = expand_rate_limit(config)
                try:
                    await self.client.update_rate_limit(instance_id, zone_id, rule_id, record)
                except CISAPIError as exc:
                    raise _remote_error("update", data.id, exc) from exc
                logger.info("rate_limit.update.success")
            else:
                logger.info("rate_limit.update.noop")

        await self.read(data)

    async def delete(self, data: RateLimitData) -> None:
        """Delete the rule; a rule that is already gone counts as deleted.

        Raises:
            RemoteAppError: Any API failure other than not-found.
        """
        with operation_context("delete", data.id):
            rule_id, zone_id, instance_id = decode_rule_id(data.id)
            try:
                await self.client.delete_rate_limit(instance_id, zone_id, rule_id)
            except CISNotFoundError:
                logger.info("rate_limit.delete.already_gone")
            except CISAPIError as exc:
                raise _remote_error("delete", data.id, exc) from exc
            else:
                logger.info("rate_limit.delete.success")
            data.set_id("")

    async def exists(self, data: RateLimitData) -> bool:
        with operation_context("exists", data.id):
            rule_id, zone_id, instance_id = decode_rule_id(data.id)
            try:
                await self.client.get_rate_limit(instance_id, zone_id, rule_id)
            except CISNotFoundError:
                return False
            except CISInvalidResponseError:
                # The rule answered, only its body could not be parsed
                logger.warning("rate_limit.exists.unexpected_response")
                return True
            except CISAPIError as exc:
                raise _remote_error("exists", data.id, exc) from exc
            return True

    async def import_state(self, resource_id: str) -> RateLimitData:
        """Adopt an existing rule by its composite identifier.

        Raises:
            IdentifierFormatError: ``resource_id`` is malformed.
            ResourceNotFoundAppError: No such rule exists remotely.
        """
        data = await super().import_state(resource_id)
        if not data.id:
            raise ResourceNotFoundAppError(
                code="rate_limit_not_found",
                message="Cannot import non-existent rate limit",
                details={"operation": "import", "resource_id": resource_id},
            )
        logger.info("rate_limit.import.success", extra={"resource_id": resource_id})
        return data
