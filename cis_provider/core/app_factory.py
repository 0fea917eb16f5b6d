"""Application factory for the provider service.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from cis_provider import __version__
from cis_provider.api.deps import close_cis_client
from cis_provider.api.routes import health_router, rate_limits_router, schema_router
from cis_provider.core.config import settings
from cis_provider.core.exception_handlers import setup_exception_handlers
from cis_provider.core.logging import configure_logging
from cis_provider.core.middleware import request_id_middleware
from cis_provider.core.openapi import apply_openapi_customizations


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await close_cis_client()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="CIS Rate Limit Provider",
        description=(
            "Declarative resource provider for IBM Cloud Internet Services rate "
            "limit rules. Translates resource configuration into API payloads, "
            "drives create/read/update/delete/exists/import against the remote "
            "API and returns state shaped for diffing."
        ),
        version=__version__,
        lifespan=_lifespan,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(rate_limits_router, prefix="/v1")
    app.include_router(schema_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
