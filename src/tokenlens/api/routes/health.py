"""Health check endpoint with cache and pacing diagnostics."""

from typing import Any

from fastapi import APIRouter

from tokenlens.api.dependencies import MarketServiceDep, SettingsDep

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: SettingsDep, service: MarketServiceDep) -> dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        dict with status, version, whether the upstream API key is set,
        cache statistics and per-category pacing counters.
    """
    upstream_configured = service.upstream_configured
    stats = service.stats()

    return {
        "status": "ok" if upstream_configured else "degraded",
        "version": settings.app_version,
        "upstream_configured": upstream_configured,
        "cache": stats["cache"],
        "pacing": stats["pacing"],
    }
