"""Unit tests for flattening API records into resource state."""

import pytest

from cis_provider.resources.rate_limit.expand import (
    expand_action,
    expand_bypass,
    expand_rate_limit,
)
from cis_provider.resources.rate_limit.flatten import (
    flatten_action,
    flatten_bypass,
    flatten_correlate,
    flatten_match,
    flatten_match_response,
    flatten_rate_limit,
)
from cis_provider.schemas.cis import (
    Action,
    ByPass,
    Correlate,
    Match,
    MatchResponse,
    MatchResponseHeader,
    RateLimitRecord,
)
from cis_provider.schemas.rate_limit import ActionConfig, ByPassConfig, RateLimitConfig


class TestFlattenMatchResponse:
    def test_empty_response_collapses(self) -> None:
        assert flatten_match_response(MatchResponse()) is None

    def test_empty_lists_collapse(self) -> None:
        assert flatten_match_response(MatchResponse(statuses=[], headers=[])) is None

    def test_missing_response_collapses(self) -> None:
        assert flatten_match_response(None) is None

    def test_origin_traffic_false_only(self) -> None:
        response = flatten_match_response(MatchResponse(origin_traffic=False))

        assert response is not None
        assert response.model_dump(exclude_none=True) == {"origin_traffic": False}

    def test_status_and_headers(self) -> None:
        response = flatten_match_response(
            MatchResponse(
                statuses=[403, 401],
                headers=[MatchResponseHeader(name="X", op="eq", value="1")],
            )
        )

        assert response.status == {401, 403}
        assert response.origin_traffic is None
        assert response.headers[0].name == "X"

    def test_status_read_from_wire_alias(self) -> None:
        response = flatten_match_response(MatchResponse.model_validate({"status": [429]}))

        assert response.status == {429}


class TestFlattenAlwaysEmittedBlocks:
    def test_match_and_request_present_when_remote_empty(self) -> None:
        match = flatten_match(None)

        assert match.request is not None
        assert match.request.url is None
        assert match.request.methods is None
        assert match.response is None

    def test_request_lists_become_sets(self) -> None:
        match = flatten_match(Match.model_validate({"request": {"url": "*", "methods": ["POST", "GET"], "schemes": ["HTTPS"]}}))

        assert match.request.methods == {"GET", "POST"}
        assert match.request.schemes == {"HTTPS"}

    def test_empty_request_lists_stay_empty(self, config: RateLimitConfig) -> None:
        request = config.match.request.model_copy(update={"methods": set(), "schemes": set()})
        desired = config.model_copy(
            update={"match": config.match.model_copy(update={"request": request})}
        )

        record = expand_rate_limit(desired)
        state = flatten_rate_limit(record.model_copy(update={"id": "r1"}), "r1", "zone1", desired.cis_id)

        assert record.match.request.methods == []
        assert state.match.request.methods == set()
        assert state.match.request.schemes == set()
        assert state.match.request == desired.match.request

    def test_correlate_present_without_by(self) -> None:
        assert flatten_correlate(None).by is None
        assert flatten_correlate(Correlate()).by is None
        assert flatten_correlate(Correlate(by="nat")).by == "nat"


class TestActionRoundTrip:
    @pytest.mark.parametrize(
        ("mode", "timeout"),
        [("simulate", 10), ("ban", 60), ("challenge", None), ("js_challenge", None)],
    )
    def test_mode_round_trips(self, mode: str, timeout: int | None) -> None:
        flattened = flatten_action(expand_action(ActionConfig(mode=mode, timeout=timeout)))

        assert flattened.mode == mode
        assert flattened.timeout == timeout

    def test_zero_timeout_from_remote_is_absent(self) -> None:
        assert flatten_action(Action(mode="challenge", timeout=0)).timeout is None

    def test_response_round_trips(self) -> None:
        config = ActionConfig(
            mode="ban",
            timeout=60,
            response={"content_type": "text/xml", "body": "<blocked/>"},
        )

        assert flatten_action(expand_action(config)) == config


class TestBypassOrder:
    def test_order_preserved(self) -> None:
        entries = [
            ByPass(name="url", value="c.example.org"),
            ByPass(name="url", value="a.example.org"),
            ByPass(name="url", value="b.example.org"),
        ]

        assert expand_bypass(flatten_bypass(entries)) == entries

    def test_empty_and_absent_are_distinct(self) -> None:
        assert flatten_bypass([]) == []
        assert flatten_bypass(None) is None

    def test_config_order_preserved(self) -> None:
        config = [ByPassConfig(value="z"), ByPassConfig(value="y")]

        assert flatten_bypass(expand_bypass(config)) == config


class TestFlattenRateLimit:
    def test_full_round_trip(self, config: RateLimitConfig, zone_id: str, instance_crn: str) -> None:
        record = expand_rate_limit(config).model_copy(update={"id": "rule42"})

        state = flatten_rate_limit(record, "rule42", zone_id, instance_crn)

        assert state.id == f"rule42:{zone_id}:{instance_crn}"
        assert state.rule_id == "rule42"
        assert state.cis_id == instance_crn
        assert state.domain_id == config.domain_id
        assert RateLimitConfig.model_validate(state.model_dump(exclude={"id", "rule_id"})) == config

    def test_server_defaults(self, zone_id: str, instance_crn: str) -> None:
        record = RateLimitRecord.model_validate(
            {
                "id": "rule1",
                "threshold": 5,
                "period": 60,
                "disabled": True,
                "action": {"mode": "js_challenge"},
                "match": {"request": {"url": "*"}, "response": {}},
                "unknown_server_field": "ignored",
            }
        )

        state = flatten_rate_limit(record, "rule1", zone_id, instance_crn)

        assert state.disabled is True
        assert state.description is None
        assert state.action.timeout is None
        assert state.match.request.url == "*"
        assert state.match.response is None
        assert state.correlate is not None
        assert state.correlate.by is None
        assert state.bypass is None
