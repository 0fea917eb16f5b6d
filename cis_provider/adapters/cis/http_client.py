"""Internet Services rate limit API client over HTTP."""

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from cis_provider.adapters.cis.base import AbstractRateLimitClient
from cis_provider.adapters.cis.exceptions import (
    CISAPIError,
    CISInvalidResponseError,
    CISNotFoundError,
    CISUnavailableError,
)
from cis_provider.schemas.cis import RateLimitRecord, to_payload

logger = logging.getLogger(__name__)


class CISHttpClient(AbstractRateLimitClient):
    """Async client for ``/v1/{crn}/zones/{zone_id}/rate_limits``.

    Responses use the API's envelope ``{"result": ..., "success": bool,
    "errors": [...]}``; the envelope is unwrapped here and failures are
    mapped to typed exceptions by status code. No retries are attempted.
    """

    def __init__(
        self,
        iam_token: str,
        endpoint: str = "https://api.cis.cloud.ibm.com",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the underlying httpx client.

        Args:
            iam_token: IAM access token, sent as ``X-Auth-User-Token``.
            endpoint: Base URL of the Internet Services API.
            timeout_seconds: Timeout for requests in seconds.
            transport: Optional transport override (used by tests).
        """
        token = iam_token if iam_token.lower().startswith("bearer ") else f"Bearer {iam_token}"
        self.client = httpx.AsyncClient(
            base_url=endpoint.rstrip("/"),
            timeout=timeout_seconds,
            headers={
                "X-Auth-User-Token": token,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    @staticmethod
    def _path(instance_id: str, zone_id: str, rule_id: str | None = None) -> str:
        path = f"/v1/{quote(instance_id, safe='')}/zones/{quote(zone_id, safe='')}/rate_limits"
        if rule_id is not None:
            path = f"{path}/{quote(rule_id, safe='')}"
        return path

    @staticmethod
    def _remote_errors(response: httpx.Response) -> list[dict[str, Any]]:
        try:
            body = response.json()
        except ValueError:
            return []
        if isinstance(body, dict) and isinstance(body.get("errors"), list):
            return [e for e in body["errors"] if isinstance(e, dict)]
        return []

    def _map_status(self, method: str, path: str, response: httpx.Response) -> CISAPIError:
        status = response.status_code
        errors = self._remote_errors(response)
        message = f"{method} {path} failed"
        if errors and errors[0].get("message"):
            message = f"{message}: {errors[0]['message']}"
        if status == 404:
            return CISNotFoundError(message, status_code=status, errors=errors)
        if status >= 500:
            return CISUnavailableError(message, status_code=status, errors=errors)
        return CISAPIError(message, status_code=status, errors=errors)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the unwrapped ``result`` field."""
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise CISUnavailableError(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise CISUnavailableError(f"{method} {path} failed: {exc}") from exc

        logger.debug(
            "cis.response",
            extra={"method": method, "path": path, "status_code": response.status_code},
        )

        if response.is_error:
            raise self._map_status(method, path, response)

        if response.status_code == 204 or not response.content:
            return None

        try:
            body = response.json()
        except ValueError as exc:
            raise CISInvalidResponseError(
                f"{method} {path} returned invalid JSON",
                status_code=response.status_code,
            ) from exc

        if isinstance(body, dict) and body.get("success") is False:
            raise CISAPIError(
                f"{method} {path} was not successful",
                status_code=response.status_code,
                errors=body.get("errors") or [],
            )

        return body.get("result") if isinstance(body, dict) else body

    def _record(self, result: Any, method: str, path: str) -> RateLimitRecord:
        if not isinstance(result, dict):
            raise CISInvalidResponseError(f"{method} {path} returned no rate limit record")
        try:
            return RateLimitRecord.model_validate(result)
        except ValidationError as exc:
            raise CISInvalidResponseError(
                f"{method} {path} returned an invalid rate limit record",
                errors=[
                    {"field": ".".join(str(loc) for loc in err["loc"]), "message": err["msg"]}
                    for err in exc.errors()
                ],
            ) from exc

    async def create_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        record: RateLimitRecord,
    ) -> RateLimitRecord:
        path = self._path(instance_id, zone_id)
        result = await self._request("POST", path, json=to_payload(record))
        return self._record(result, "POST", path)

    async def get_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
    ) -> RateLimitRecord:
        path = self._path(instance_id, zone_id, rule_id)
        result = await self._request("GET", path)
        return self._record(result, "GET", path)

    async def update_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
        record: RateLimitRecord,
    ) -> RateLimitRecord:
        path = self._path(instance_id, zone_id, rule_id)
        result = await self._request("PUT", path, json=to_payload(record))
        return self._record(result, "PUT", path)

    async def delete_rate_limit(
        self,
        instance_id: str,
        zone_id: str,
        rule_id: str,
    ) -> None:
        await self._request("DELETE", self._path(instance_id, zone_id, rule_id))
