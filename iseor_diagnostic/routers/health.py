"""Health check endpoints for production monitoring."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request

from iseor_diagnostic.schemas.health import DependencyCheck, HealthResponse
from iseor_diagnostic.store import data_store

router = APIRouter(tags=["health"])


def _probe(name: str, check_fn) -> DependencyCheck:
    """Run one check and time it; a raised error marks the dependency unhealthy."""
    start = time.monotonic()
    try:
        details = check_fn()
        status = "healthy"
    except Exception as exc:
        details = str(exc)[:200]
        status = "unhealthy"
    return DependencyCheck(
        name=name,
        status=status,
        latency_ms=round((time.monotonic() - start) * 1000, 2),
        details=details,
    )


def _check_store() -> str:
    return f"{len(data_store.sessions)} session(s), {len(data_store.dysfunctions)} dysfunction(s)"


def _check_catalog() -> str:
    count = len(data_store.get_reference_items())
    if count == 0:
        raise RuntimeError("Reference catalog is empty")
    return f"{count} active item(s)"


def _health(request: Request, checks: list[DependencyCheck], failed: str) -> HealthResponse:
    settings = request.app.state.settings
    return HealthResponse(
        status="healthy" if all(c.status == "healthy" for c in checks) else failed,
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        reference_version=settings.reference_version,
        checks=checks,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Basic health check: the store answers."""
    return _health(request, [_probe("store", _check_store)], failed="degraded")


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(request: Request) -> HealthResponse:
    """Readiness: the store answers and the reference catalog is seeded."""
    checks = [_probe("store", _check_store), _probe("reference_catalog", _check_catalog)]
    return _health(request, checks, failed="unhealthy")


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Liveness probe: is the process alive?"""
    return {"status": "alive"}
