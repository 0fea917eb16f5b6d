"""Tests for the HTTP rate limit client using httpx.MockTransport."""

import json

import httpx
import pytest

from cis_provider.adapters.cis.exceptions import (
    CISAPIError,
    CISInvalidResponseError,
    CISNotFoundError,
    CISUnavailableError,
)
from cis_provider.adapters.cis.http_client import CISHttpClient
from cis_provider.schemas.cis import Action, Correlate, RateLimitRecord

CRN = "crn:v1:bluemix:public:internet-svcs:global:a/acct:inst::"
ENCODED_CRN = "crn%3Av1%3Abluemix%3Apublic%3Ainternet-svcs%3Aglobal%3Aa%2Facct%3Ainst%3A%3A"

RULE = {
    "id": "rule1",
    "threshold": 10,
    "period": 60,
    "disabled": False,
    "action": {"mode": "ban", "timeout": 60},
    "match": {"request": {"url": "*"}},
    "correlate": {"by": "nat"},
}


def _envelope(result, success: bool = True, errors=None) -> dict:
    return {"result": result, "success": success, "errors": errors or [], "messages": []}


def _client(handler) -> CISHttpClient:
    return CISHttpClient(
        iam_token="token-123",
        endpoint="https://cis.test/",
        transport=httpx.MockTransport(handler),
    )


def _record() -> RateLimitRecord:
    return RateLimitRecord(
        threshold=10,
        period=60,
        action=Action(mode="ban", timeout=60),
        correlate=Correlate(),
    )


@pytest.mark.asyncio
async def test_create_posts_payload_and_unwraps_result() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.raw_path.decode()
        seen["token"] = request.headers["X-Auth-User-Token"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_envelope(RULE))

    client = _client(handler)
    created = await client.create_rate_limit(CRN, "zone1", _record())
    await client.aclose()

    assert created.id == "rule1"
    assert seen["method"] == "POST"
    assert seen["path"] == f"/v1/{ENCODED_CRN}/zones/zone1/rate_limits"
    assert seen["token"] == "Bearer token-123"
    assert seen["body"] == {
        "threshold": 10,
        "period": 60,
        "disabled": False,
        "action": {"mode": "ban", "timeout": 60},
        "correlate": {},
    }


@pytest.mark.asyncio
async def test_get_update_delete_paths() -> None:
    calls: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.raw_path.decode()))
        if request.method == "DELETE":
            return httpx.Response(200, json=_envelope({"id": "rule1"}))
        return httpx.Response(200, json=_envelope(RULE))

    client = _client(handler)
    fetched = await client.get_rate_limit(CRN, "zone1", "rule1")
    await client.update_rate_limit(CRN, "zone1", "rule1", _record())
    assert await client.delete_rate_limit(CRN, "zone1", "rule1") is None
    await client.aclose()

    rule_path = f"/v1/{ENCODED_CRN}/zones/zone1/rate_limits/rule1"
    assert calls == [("GET", rule_path), ("PUT", rule_path), ("DELETE", rule_path)]
    assert fetched.correlate.by == "nat"


@pytest.mark.asyncio
async def test_404_maps_to_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            404,
            json=_envelope(None, success=False, errors=[{"code": 1004, "message": "rate limit not found"}]),
        )

    client = _client(handler)
    with pytest.raises(CISNotFoundError) as exc_info:
        await client.get_rate_limit(CRN, "zone1", "missing")
    await client.aclose()

    assert exc_info.value.status_code == 404
    assert "rate limit not found" in exc_info.value.message
    assert exc_info.value.errors[0]["code"] == 1004


@pytest.mark.asyncio
async def test_5xx_maps_to_unavailable() -> None:
    client = _client(lambda request: httpx.Response(503, text="upstream down"))

    with pytest.raises(CISUnavailableError) as exc_info:
        await client.get_rate_limit(CRN, "zone1", "rule1")
    await client.aclose()

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_4xx_maps_to_api_error_not_not_found() -> None:
    client = _client(lambda request: httpx.Response(400, json=_envelope(None, success=False)))

    with pytest.raises(CISAPIError) as exc_info:
        await client.create_rate_limit(CRN, "zone1", _record())
    await client.aclose()

    assert not isinstance(exc_info.value, CISNotFoundError)
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_unsuccessful_envelope_with_200() -> None:
    client = _client(
        lambda request: httpx.Response(200, json=_envelope(None, success=False, errors=[{"message": "bad"}]))
    )

    with pytest.raises(CISAPIError) as exc_info:
        await client.get_rate_limit(CRN, "zone1", "rule1")
    await client.aclose()

    assert exc_info.value.errors == [{"message": "bad"}]


@pytest.mark.asyncio
async def test_network_error_maps_to_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(CISUnavailableError):
        await client.get_rate_limit(CRN, "zone1", "rule1")
    await client.aclose()


@pytest.mark.asyncio
async def test_bearer_prefix_not_duplicated() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["token"] = request.headers["X-Auth-User-Token"]
        return httpx.Response(200, json=_envelope(RULE))

    client = CISHttpClient(
        iam_token="Bearer abc",
        endpoint="https://cis.test",
        transport=httpx.MockTransport(handler),
    )
    await client.get_rate_limit(CRN, "zone1", "rule1")
    await client.aclose()

    assert seen["token"] == "Bearer abc"


@pytest.mark.asyncio
async def test_record_missing_required_field_is_invalid_response() -> None:
    client = _client(
        lambda request: httpx.Response(200, json=_envelope({"id": "r1", "threshold": 5, "period": 60}))
    )

    with pytest.raises(CISInvalidResponseError) as exc_info:
        await client.get_rate_limit(CRN, "zone1", "r1")
    await client.aclose()

    assert exc_info.value.errors[0]["field"] == "action"


@pytest.mark.asyncio
async def test_non_json_body_is_invalid_response() -> None:
    client = _client(lambda request: httpx.Response(200, content=b"<html>maintenance</html>"))

    with pytest.raises(CISInvalidResponseError):
        await client.get_rate_limit(CRN, "zone1", "rule1")
    await client.aclose()


@pytest.mark.asyncio
async def test_bypass_without_name_defaults_to_url() -> None:
    rule = dict(RULE, bypass=[{"value": "example.org/health"}])
    client = _client(lambda request: httpx.Response(200, json=_envelope(rule)))

    record = await client.get_rate_limit(CRN, "zone1", "rule1")
    await client.aclose()

    assert record.bypass[0].name == "url"
    assert record.bypass[0].value == "example.org/health"
