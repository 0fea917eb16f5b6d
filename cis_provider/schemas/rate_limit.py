"""Pydantic schemas for the declarative rate limit resource.

``RateLimitConfig`` is what the IaC engine declares; ``RateLimitState`` is
what the provider reports back after reading the remote rule. Optional
sub-blocks are plain optional fields: ``None`` means the block is absent.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

ActionMode = Literal["simulate", "ban", "challenge", "js_challenge"]
ContentType = Literal["text/plain", "text/xml", "application/json"]
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "_ALL_"]
Scheme = Literal["HTTP", "HTTPS", "_ALL_"]
CorrelateBy = Literal["nat"]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ActionResponseConfig(_ConfigModel):
    """Custom response served when the action fires."""

    content_type: ContentType = Field(..., description="MIME type of the custom body.")
    body: str = Field(..., description="Body returned to the client.")


class ActionConfig(_ConfigModel):
    """What happens once the threshold is exceeded.

    ``timeout`` is required for ``simulate`` and ``ban`` and must be left
    unset for ``challenge`` and ``js_challenge``; the check happens when the
    configuration is expanded into an API payload.
    """

    mode: ActionMode = Field(..., description="Action taken on matching traffic.")
    timeout: int | None = Field(
        default=None,
        ge=0,
        description="Seconds the action stays in effect; the API accepts 10 - 86400.",
    )
    response: ActionResponseConfig | None = Field(
        default=None,
        description="Optional custom response for simulate/ban.",
    )


class MatchRequestConfig(_ConfigModel):
    url: str | None = Field(default=None, description="URL pattern to match, e.g. *.example.org/path*")
    methods: set[HttpMethod] | None = Field(default=None, description="HTTP methods to match.")
    schemes: set[Scheme] | None = Field(default=None, description="URL schemes to match.")

    @field_serializer("methods", "schemes")
    def _sorted(self, value: set[str] | None) -> list[str] | None:
        return sorted(value) if value is not None else None


class MatchResponseHeaderConfig(_ConfigModel):
    name: str | None = None
    op: str | None = None
    value: str | None = None


class MatchResponseConfig(_ConfigModel):
    status: set[int] | None = Field(default=None, description="Origin status codes to count.")
    origin_traffic: bool | None = Field(
        default=None,
        description="Count traffic served by the origin; unset leaves the API default.",
    )
    headers: list[MatchResponseHeaderConfig] | None = Field(
        default=None,
        description="Response header conditions, in order.",
    )

    @field_serializer("status")
    def _sorted(self, value: set[int] | None) -> list[int] | None:
        return sorted(value) if value is not None else None


class MatchConfig(_ConfigModel):
    request: MatchRequestConfig | None = None
    response: MatchResponseConfig | None = None


class CorrelateConfig(_ConfigModel):
    by: CorrelateBy | None = Field(default="nat", description="How requests are grouped for counting.")


class ByPassConfig(_ConfigModel):
    name: str = Field(default="url", description="Bypass key; only url is supported by the API.")
    value: str | None = Field(default=None, description="Value exempted from the rule.")


class RateLimitConfig(_ConfigModel):
    """Declarative configuration of one rate limit rule."""

    cis_id: str = Field(..., min_length=1, description="CRN of the Internet Services instance.")
    domain_id: str = Field(..., min_length=1, description="Domain identifier as zone_id:cis_id.")
    threshold: int = Field(..., ge=2, le=1000000, description="Requests allowed per period.")
    period: int = Field(..., ge=1, le=3600, description="Counting period in seconds.")
    description: str | None = None
    disabled: bool = False
    action: ActionConfig
    match: MatchConfig | None = None
    correlate: CorrelateConfig | None = None
    bypass: list[ByPassConfig] | None = None


class RateLimitState(RateLimitConfig):
    """Configuration as read back from the API, plus computed fields."""

    id: str = Field(..., description="Composite identifier rule_id:zone_id:cis_id.")
    rule_id: str = Field(..., description="Rule id assigned by the API.")


TRACKED_FIELDS: tuple[str, ...] = (
    "disabled",
    "threshold",
    "period",
    "description",
    "action",
    "match",
    "correlate",
    "bypass",
)


class UpdateRateLimitRequest(BaseModel):
    """Body of an update call: desired config and the config last applied."""

    config: RateLimitConfig
    prior: RateLimitConfig | None = Field(
        default=None,
        description="Previously applied configuration; when omitted every field counts as changed.",
    )


class ImportRateLimitRequest(BaseModel):
    id: str = Field(..., min_length=1, description="Composite identifier rule_id:zone_id:cis_id.")
