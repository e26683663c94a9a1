"""Base HTTP endpoints for health checks, metrics, and service info.

These are used by load balancers, monitoring systems, and service discovery.
"""

from enum import Enum

from fastapi import APIRouter, Response

from athena_tutor.platform.observability.logging import get_logger
from athena_tutor.platform.observability.metrics import metrics as prom_metrics
from athena_tutor.platform.server.health import HealthCheck, metadata

logger = get_logger(__name__)

base_router = APIRouter()
base_tags: list[Enum | str] = ["base"]


@base_router.get("/health", tags=base_tags)
async def health():
    """Health check endpoint for load balancers and orchestrators.

    Returns:
        200 OK with status if healthy, 404 while draining
    """
    if is_healthy():
        return {"status": "OK"}
    return Response(status_code=404)


def is_healthy() -> bool:
    if not HealthCheck.status():
        logger.info("health_check_failed", reason="disabled")
        return False
    return True


@base_router.get("/info", tags=base_tags)
async def info():
    return metadata.info()


@base_router.get("/metrics", tags=base_tags)
async def metrics():
    body, media_type = prom_metrics()
    return Response(body, media_type=media_type)
