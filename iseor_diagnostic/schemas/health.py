"""Schemas for health probes."""

from __future__ import annotations

from pydantic import BaseModel


class DependencyCheck(BaseModel):
    """Outcome of probing one dependency (store, catalog)."""

    name: str
    status: str
    latency_ms: float | None = None
    details: str | None = None


class HealthResponse(BaseModel):
    status: str
    app_name: str
    version: str
    environment: str
    reference_version: str
    checks: list[DependencyCheck]
