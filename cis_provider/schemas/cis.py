"""Pydantic models for the Internet Services rate limit API payload.

These mirror the JSON the remote API accepts and returns. Unknown keys sent
back by the server are ignored; ``None`` fields are dropped when a payload is
serialized with :func:`to_payload`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _RemoteModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ActionResponse(_RemoteModel):
    """Custom body returned to clients when the action triggers."""

    content_type: str
    body: str


class Action(_RemoteModel):
    mode: str
    timeout: int | None = None
    response: ActionResponse | None = None


class MatchRequest(_RemoteModel):
    url: str | None = None
    methods: list[str] | None = None
    schemes: list[str] | None = None


class MatchResponseHeader(_RemoteModel):
    name: str | None = None
    op: str | None = None
    value: str | None = None


class MatchResponse(_RemoteModel):
    # The API names the status code list "status"
    statuses: list[int] | None = Field(default=None, alias="status")
    origin_traffic: bool | None = None
    headers: list[MatchResponseHeader] | None = None


class Match(_RemoteModel):
    request: MatchRequest | None = None
    response: MatchResponse | None = None


class Correlate(_RemoteModel):
    by: str | None = None


class ByPass(_RemoteModel):
    name: str = "url"
    value: str | None = None


class RateLimitRecord(_RemoteModel):
    """A rate limit rule as stored by the remote API."""

    id: str | None = None
    threshold: int
    period: int
    description: str | None = None
    disabled: bool = False
    action: Action
    match: Match | None = None
    correlate: Correlate | None = None
    bypass: list[ByPass] | None = None


def to_payload(record: RateLimitRecord) -> dict[str, Any]:
    """Serialize a record into the JSON body expected by the API."""
    return record.model_dump(by_alias=True, exclude_none=True)
