from __future__ import annotations

from cis_provider.api.routes.health import router as health_router
from cis_provider.api.routes.rate_limits import router as rate_limits_router
from cis_provider.api.routes.schema import router as schema_router

__all__ = ["health_router", "rate_limits_router", "schema_router"]
