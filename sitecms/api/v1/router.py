"""API v1 router module."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from sitecms.api.v1.admin import router as admin_router
from sitecms.api.v1.dependencies import get_services
from sitecms.api.v1.sync import router as sync_router
from sitecms.core.config import settings
from sitecms.core.events import Services

router = APIRouter(default_response_class=JSONResponse)
router.include_router(admin_router)
router.include_router(sync_router)


@router.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint.

    Returns
    -------
        Dict containing health status information
    """
    return {
        "status": "healthy",
        "version": settings.version,
        "correlation_id": request.state.correlation_id,
    }


@router.get("/health/redis")
async def redis_health_check(
    request: Request, services: Services = Depends(get_services)
) -> dict[str, str]:
    """
    Redis health check endpoint.

    Returns
    -------
        Dict containing Redis health status information
    """
    health = await services.health_check()
    return {
        **{key: str(value) for key, value in health.items()},
        "correlation_id": request.state.correlation_id,
    }
