from __future__ import annotations

from fastapi import APIRouter

from cis_provider import __version__
from cis_provider.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check polled by the IaC engine before lifecycle calls.

    Returns:
        dict: ``status`` plus the provider version and configured API backend.
    """

    return {
        "status": "ok",
        "version": __version__,
        "backend": settings.cis.backend,
    }
