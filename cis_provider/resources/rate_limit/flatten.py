"""Flatten a remote rate limit record back into the declarative shape.

Block emission is uneven. ``action``, ``match``, ``match.request`` and
``correlate`` are always present in the flattened state; ``match.response``
is only present when the remote rule sets at least one of its fields.
"""

from cis_provider.resources.identifiers import encode_domain_id, encode_rule_id
from cis_provider.schemas.cis import (
    Action,
    ByPass,
    Correlate,
    Match,
    MatchRequest,
    MatchResponse,
    RateLimitRecord,
)
from cis_provider.schemas.rate_limit import (
    ActionConfig,
    ActionResponseConfig,
    ByPassConfig,
    CorrelateConfig,
    MatchConfig,
    MatchRequestConfig,
    MatchResponseConfig,
    MatchResponseHeaderConfig,
    RateLimitState,
)


def flatten_action(action: Action) -> ActionConfig:
    response = None
    if action.response is not None:
        response = ActionResponseConfig(
            content_type=action.response.content_type,
            body=action.response.body,
        )
    return ActionConfig(mode=action.mode, timeout=action.timeout or None, response=response)


def flatten_match_request(request: MatchRequest | None) -> MatchRequestConfig:
    request = request or MatchRequest()
    return MatchRequestConfig(
        url=request.url,
        methods=set(request.methods) if request.methods is not None else None,
        schemes=set(request.schemes) if request.schemes is not None else None,
    )


def flatten_match_response(response: MatchResponse | None) -> MatchResponseConfig | None:
    """Return the response block, or None when nothing in it is set."""
    if response is None:
        return None

    flattened = MatchResponseConfig()
    populated = False

    if response.origin_traffic is not None:
        flattened.origin_traffic = response.origin_traffic
        populated = True
    if response.statuses:
        flattened.status = set(response.statuses)
        populated = True
    if response.headers:
        flattened.headers = [
            MatchResponseHeaderConfig(name=h.name, op=h.op, value=h.value)
            for h in response.headers
        ]
        populated = True

    return flattened if populated else None


def flatten_match(match: Match | None) -> MatchConfig:
    match = match or Match()
    return MatchConfig(
        request=flatten_match_request(match.request),
        response=flatten_match_response(match.response),
    )


def flatten_correlate(correlate: Correlate | None) -> CorrelateConfig:
    if correlate is None or not correlate.by:
        return CorrelateConfig(by=None)
    return CorrelateConfig(by=correlate.by)


def flatten_bypass(bypass: list[ByPass] | None) -> list[ByPassConfig] | None:
    if bypass is None:
        return None
    return [ByPassConfig(name=item.name, value=item.value) for item in bypass]


def flatten_rate_limit(
    record: RateLimitRecord,
    rule_id: str,
    zone_id: str,
    instance_id: str,
) -> RateLimitState:
    """Build the resource state for a rule read from the API."""
    return RateLimitState(
        id=encode_rule_id(rule_id, zone_id, instance_id),
        rule_id=rule_id,
        cis_id=instance_id,
        domain_id=encode_domain_id(zone_id, instance_id),
        threshold=record.threshold,
        period=record.period,
        description=record.description,
        disabled=record.disabled,
        action=flatten_action(record.action),
        match=flatten_match(record.match),
        correlate=flatten_correlate(record.correlate),
        bypass=flatten_bypass(record.bypass),
    )
