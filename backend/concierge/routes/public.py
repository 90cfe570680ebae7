# /concierge/routes/public.py

import secrets
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest
from datetime import datetime, timezone

from concierge.config.settings import settings
from concierge.services.db_service import db_service
from concierge.services.cache_service import cache_service
from concierge.services.task_service import task_catalog_service
from concierge.services.workflow_service import workflow_service
from concierge.utils.tasks import pending_background_tasks
from concierge.models.api import APIResponse

# Public endpoints that do not require user authentication: root, health
# probes and metrics. /metrics is protected by an API key when one is set.

router = APIRouter()


async def verify_metrics_access(request: Request):
    if settings.api_key:
        provided_key = request.headers.get("X-API-KEY")
        if not (provided_key and secrets.compare_digest(provided_key, settings.api_key)):
            raise HTTPException(status_code=403, detail="Invalid or missing API key")


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Move Concierge API",
        "version": "1.0.0",
        "status": "operational",
        "environment": settings.environment
    }


@router.get("/health", summary="Basic Health Check")
async def health_check():
    """Basic health check for load balancers."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc)}


@router.get("/health/ready", summary="Readiness Probe")
async def readiness_check():
    """Readiness probe checking MongoDB and Redis."""
    if not await db_service.health_check():
        raise HTTPException(status_code=503, detail="Service not ready: database unavailable")
    if not await cache_service.ping():
        raise HTTPException(status_code=503, detail="Service not ready: cache unavailable")
    return {"status": "ready"}


@router.get("/health/live", summary="Liveness Probe")
async def liveness_check():
    """Liveness probe."""
    return {"status": "alive"}


@router.get("/health/detailed", response_model=APIResponse, tags=["Admin"])
async def comprehensive_health_check():
    """Dependency status plus a content check of the loaded catalogs."""
    health_status = {"status": "healthy", "services": {}, "content": {}}

    if await db_service.health_check():
        health_status["services"]["database"] = "connected"
    else:
        health_status["services"]["database"] = "error"
        health_status["status"] = "degraded"

    if await cache_service.ping():
        health_status["services"]["cache"] = "connected"
    else:
        health_status["services"]["cache"] = "error"
        health_status["status"] = "degraded"

    health_status["services"]["llm"] = "configured" if settings.openai_api_key else "not_configured"
    health_status["services"]["notifications"] = "configured" if settings.notification_webhook_url else "not_configured"

    content = workflow_service.content_counts()
    content["task_catalog"] = len(task_catalog_service.get_catalog())
    if health_status["services"]["database"] == "connected":
        content["stored"] = await db_service.get_content_counts()
    health_status["content"] = content
    if content["task_catalog"] == 0:
        health_status["status"] = "degraded"
    health_status["background_tasks"] = pending_background_tasks()

    return APIResponse(
        success=True,
        message="Comprehensive health status retrieved.",
        data=health_status,
        version=settings.api_version
    )


@router.get("/metrics", tags=["Monitoring"])
async def metrics(_: None = Depends(verify_metrics_access)):
    """Secured Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(), media_type="text/plain")
