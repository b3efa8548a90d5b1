"""
Health Check Endpoints
======================

API health check endpoints for monitoring and Kubernetes probes.
"""

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

import psutil
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from api.dependencies import get_user_store
from core.user_store import UserStore
from exceptions import StorageError


# Set up module logger
logger = logging.getLogger(__name__)

router = APIRouter()


class ServiceStatus(str, Enum):
    """Service health status enumeration."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ServiceCheckResult(BaseModel):
    """Result of an individual service health check."""
    status: ServiceStatus = Field(description="Service health status")
    message: Optional[str] = Field(None, description="Status message or error details")
    latency_ms: Optional[float] = Field(None, description="Check latency in milliseconds")


class SystemMetrics(BaseModel):
    """System resource metrics."""
    cpu_percent: float = Field(description="CPU usage percentage")
    memory_percent: float = Field(description="Memory usage percentage")
    memory_available_mb: float = Field(description="Available memory in MB")


class HealthCheckResponse(BaseModel):
    """Comprehensive health check response."""
    status: ServiceStatus = Field(description="Overall health status")
    timestamp: str = Field(description="ISO 8601 timestamp of the health check")
    services: Dict[str, ServiceCheckResult] = Field(description="Individual service statuses")
    system_metrics: Optional[SystemMetrics] = Field(None, description="System resource metrics")


class ProbeResponse(BaseModel):
    """Kubernetes readiness/liveness probe response."""
    status: str = Field(description="Probe status")
    timestamp: str = Field(description="ISO 8601 timestamp")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def check_user_store(user_store: UserStore) -> ServiceCheckResult:
    """
    Check that the user store backend answers.

    The in-memory backend is reported as degraded: it works, but users
    disappear on restart and are not shared between processes.
    """
    start_time = time.time()
    try:
        user_store.ping()
    except StorageError as e:
        logger.warning(f"User store health check failed: {e.message}")
        return ServiceCheckResult(
            status=ServiceStatus.UNHEALTHY,
            message=e.message
        )
    latency_ms = (time.time() - start_time) * 1000

    if user_store.backend_name == "memory":
        return ServiceCheckResult(
            status=ServiceStatus.DEGRADED,
            message="In-memory user store, data is not persisted",
            latency_ms=round(latency_ms, 2)
        )
    return ServiceCheckResult(
        status=ServiceStatus.HEALTHY,
        message="Connected",
        latency_ms=round(latency_ms, 2)
    )


def get_system_metrics() -> Optional[SystemMetrics]:
    """Gather CPU and memory usage, or None if psutil cannot read them."""
    try:
        memory = psutil.virtual_memory()
        return SystemMetrics(
            cpu_percent=psutil.cpu_percent(interval=None),
            memory_percent=memory.percent,
            memory_available_mb=round(memory.available / (1024 * 1024), 2)
        )
    except (psutil.Error, OSError) as e:
        logger.error(f"Failed to gather system metrics: {e}")
        return None


@router.get("/health", response_model=HealthCheckResponse)
def health_check(user_store: UserStore = Depends(get_user_store)) -> HealthCheckResponse:
    """Comprehensive health report: user store status plus system metrics."""
    store_result = check_user_store(user_store)
    overall = store_result.status
    logger.debug(f"Health check completed: {overall.value}")
    return HealthCheckResponse(
        status=overall,
        timestamp=_now(),
        services={"user_store": store_result},
        system_metrics=get_system_metrics()
    )


@router.get("/health/ready", response_model=ProbeResponse)
def readiness_probe(user_store: UserStore = Depends(get_user_store)) -> ProbeResponse:
    """
    Ready when the user store can be reached.

    Raises:
        HTTPException: 503 if the store is unreachable
    """
    result = check_user_store(user_store)
    if result.status == ServiceStatus.UNHEALTHY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Not ready: {result.message}"
        )
    return ProbeResponse(status="ready", timestamp=_now())


@router.get("/health/live", response_model=ProbeResponse)
def liveness_probe() -> ProbeResponse:
    """Confirms the process can respond. Checks no dependencies."""
    return ProbeResponse(status="alive", timestamp=_now())
