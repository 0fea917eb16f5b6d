"""Expand a declarative rate limit configuration into an API payload.

Validation that depends on more than one field (action mode vs. timeout)
happens here, so a bad configuration is rejected before any network call.
"""

from cis_provider.core.errors import ValidationAppError
from cis_provider.schemas.cis import (
    Action,
    ActionResponse,
    ByPass,
    Correlate,
    Match,
    MatchRequest,
    MatchResponse,
    MatchResponseHeader,
    RateLimitRecord,
)
from cis_provider.schemas.rate_limit import (
    ActionConfig,
    ByPassConfig,
    CorrelateConfig,
    MatchConfig,
    MatchRequestConfig,
    MatchResponseConfig,
    RateLimitConfig,
)

TIMED_MODES = frozenset({"simulate", "ban"})


def expand_action(action: ActionConfig) -> Action:
    """Build the action block, enforcing the mode/timeout rule.

    Only presence is checked here; the accepted range (10 - 86400 seconds)
    is enforced by the API.

    Raises:
        ValidationAppError: If a timed mode has no timeout or an untimed mode
            has one.
    """
    timeout = action.timeout or 0

    if action.mode in TIMED_MODES:
        if timeout == 0:
            raise ValidationAppError(
                code="action_timeout_required",
                message=(
                    "For the mode 'simulate' and 'ban' timeout must be set, "
                    "valid range for timeout is 10 - 86400"
                ),
                details={"field": "action.timeout"},
            )
    elif timeout != 0:
        raise ValidationAppError(
            code="action_timeout_not_allowed",
            message="Timeout field is only valid for 'simulate' and 'ban' modes",
            details={"field": "action.timeout"},
        )

    response = None
    if action.response is not None:
        response = ActionResponse(
            content_type=action.response.content_type,
            body=action.response.body,
        )

    return Action(mode=action.mode, timeout=timeout or None, response=response)


def expand_match_request(request: MatchRequestConfig) -> MatchRequest:
    return MatchRequest(
        url=request.url,
        methods=sorted(request.methods) if request.methods is not None else None,
        schemes=sorted(request.schemes) if request.schemes is not None else None,
    )


def expand_match_response(response: MatchResponseConfig) -> MatchResponse:
    headers = None
    if response.headers:
        headers = [
            MatchResponseHeader(name=h.name, op=h.op, value=h.value)
            for h in response.headers
        ]
    return MatchResponse(
        statuses=sorted(response.status) if response.status is not None else None,
        origin_traffic=response.origin_traffic,
        headers=headers,
    )


def expand_match(match: MatchConfig | None) -> Match:
    """Build the match block; absent sub-blocks stay absent."""
    if match is None:
        return Match()
    return Match(
        request=expand_match_request(match.request) if match.request is not None else None,
        response=expand_match_response(match.response) if match.response is not None else None,
    )


def expand_correlate(correlate: CorrelateConfig | None) -> Correlate:
    # An empty correlate is still sent; the API applies its own default
    if correlate is None:
        return Correlate()
    return Correlate(by=correlate.by)


def expand_bypass(bypass: list[ByPassConfig] | None) -> list[ByPass] | None:
    if bypass is None:
        return None
    return [ByPass(name=item.name, value=item.value) for item in bypass]


def expand_rate_limit(config: RateLimitConfig) -> RateLimitRecord:
    """Build the request body for create/update from a configuration."""
    return RateLimitRecord(
        threshold=config.threshold,
        period=config.period,
        description=config.description,
        disabled=config.disabled,
        action=expand_action(config.action),
        match=expand_match(config.match),
        correlate=expand_correlate(config.correlate),
        bypass=expand_bypass(config.bypass),
    )
