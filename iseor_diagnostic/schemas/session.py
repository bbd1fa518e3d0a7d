"""Schemas for diagnostic session endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from iseor_diagnostic.enums import InterviewMode, SessionStatus
from iseor_diagnostic.schemas.common import Pagination, PartialUpdateSchema, WriteSchema
from iseor_diagnostic.schemas.dysfunction import DysfunctionResponse
from iseor_diagnostic.schemas.statistics import SessionStatisticsResponse


def _as_utc(value: Any) -> Any:
    """Interview dates without an offset are taken as UTC."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionCreate(WriteSchema):
    """A new interview session. Economic inputs may be filled in later."""

    title: str = Field(..., min_length=3, max_length=255)
    company: str = Field(..., min_length=2, max_length=255)
    sector: str | None = Field(default=None, max_length=100)
    interview_date: datetime | None = None
    planned_duration_minutes: int = Field(default=90, ge=1, strict=True)
    status: SessionStatus = SessionStatus.PREPARATION
    mode: InterviewMode = InterviewMode.FREE
    participants: list[str] = Field(default_factory=list)
    preparation_notes: str | None = None
    conclusion_notes: str | None = None

    scope_revenue: Decimal | None = Field(default=None, ge=0)
    gross_margin_percent: Decimal | None = Field(default=None, ge=0, le=100)
    hours_worked_per_year: int | None = Field(default=None, ge=1, strict=True)
    headcount: int | None = Field(default=None, ge=1, strict=True)

    interview_date_utc = field_validator("interview_date")(_as_utc)


class SessionUpdate(PartialUpdateSchema):
    """Partial session update. Sending null for an economic input clears it."""

    non_nullable: ClassVar[tuple[str, ...]] = (
        "title",
        "company",
        "interview_date",
        "planned_duration_minutes",
        "status",
        "mode",
        "participants",
    )

    title: str | None = Field(default=None, min_length=3, max_length=255)
    company: str | None = Field(default=None, min_length=2, max_length=255)
    sector: str | None = Field(default=None, max_length=100)
    interview_date: datetime | None = None
    planned_duration_minutes: int | None = Field(default=None, ge=1, strict=True)
    status: SessionStatus | None = None
    mode: InterviewMode | None = None
    participants: list[str] | None = None
    preparation_notes: str | None = None
    conclusion_notes: str | None = None

    scope_revenue: Decimal | None = Field(default=None, ge=0)
    gross_margin_percent: Decimal | None = Field(default=None, ge=0, le=100)
    hours_worked_per_year: int | None = Field(default=None, ge=1, strict=True)
    headcount: int | None = Field(default=None, ge=1, strict=True)

    interview_date_utc = field_validator("interview_date")(_as_utc)


class SessionResponse(BaseModel):
    """A session with its derived hourly rate."""

    id: str
    consultant_id: str
    title: str
    company: str
    sector: str | None = None
    interview_date: datetime
    planned_duration_minutes: int
    status: str
    mode: str
    participants: list[str]
    preparation_notes: str | None = None
    conclusion_notes: str | None = None
    reference_version: str

    scope_revenue: Decimal | None = None
    gross_margin_percent: Decimal | None = None
    hours_worked_per_year: int | None = None
    headcount: int | None = None
    hourly_rate: Decimal | None = None

    created_at: datetime
    updated_at: datetime


class SessionListItem(SessionResponse):
    dysfunction_count: int
    total_annual_cost: Decimal


class SessionListResponse(BaseModel):
    sessions: list[SessionListItem]
    pagination: Pagination


class SessionDetailResponse(SessionResponse):
    """A session with its dysfunctions and statistics."""

    dysfunctions: list[DysfunctionResponse]
    statistics: SessionStatisticsResponse


class RecomputeResponse(BaseModel):
    session_id: str
    hourly_rate: Decimal | None = None
    recomputed_count: int


class SessionDeleteResponse(BaseModel):
    message: str
    deleted_dysfunctions: int
