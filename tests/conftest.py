"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any provider module is imported so
settings never pick up a developer's .env file or real credentials.
"""

import os

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("CIS_BACKEND", "memory")
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-engine-key,second-engine-key")

import pytest

from cis_provider.schemas.rate_limit import RateLimitConfig

INSTANCE_CRN = "crn:v1:bluemix:public:internet-svcs:global:a/0123abcd:5678efgh::"
ZONE_ID = "zone0123"


@pytest.fixture
def instance_crn() -> str:
    return INSTANCE_CRN


@pytest.fixture
def zone_id() -> str:
    return ZONE_ID


@pytest.fixture
def config_data() -> dict:
    """Raw configuration as the engine would send it."""
    return {
        "cis_id": INSTANCE_CRN,
        "domain_id": f"{ZONE_ID}:{INSTANCE_CRN}",
        "threshold": 20,
        "period": 900,
        "description": "login throttling",
        "action": {
            "mode": "ban",
            "timeout": 60,
            "response": {"content_type": "text/plain", "body": "slow down"},
        },
        "match": {
            "request": {
                "url": "*.example.org/login*",
                "methods": ["POST", "GET"],
                "schemes": ["HTTPS"],
            },
            "response": {
                "status": [403, 401],
                "origin_traffic": False,
                "headers": [{"name": "Cf-Cache-Status", "op": "ne", "value": "HIT"}],
            },
        },
        "correlate": {"by": "nat"},
        "bypass": [
            {"name": "url", "value": "example.org/health"},
            {"name": "url", "value": "example.org/status"},
        ],
    }


@pytest.fixture
def config(config_data: dict) -> RateLimitConfig:
    return RateLimitConfig.model_validate(config_data)
