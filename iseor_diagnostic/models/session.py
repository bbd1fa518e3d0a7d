"""Diagnostic session model — one consultant interview with its economic inputs."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from iseor_diagnostic.models.base import Base


class DiagnosticSession(Base):
    """A diagnostic interview conducted by a consultant for a company scope."""

    __tablename__ = "sessions"

    consultant_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    sector: Mapped[str | None] = mapped_column(String(100), nullable=True)
    interview_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    planned_duration_minutes: Mapped[int] = mapped_column(Integer, default=90)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="preparation", index=True)
    mode: Mapped[str] = mapped_column(String(20), nullable=False, default="free")
    participants: Mapped[list] = mapped_column(JSON, default=list)
    preparation_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    conclusion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reference_version: Mapped[str] = mapped_column(String(10), nullable=False, default="1.0")

    # Economic inputs; the hourly rate is derived from all three
    scope_revenue: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    gross_margin_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    hours_worked_per_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    headcount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)

    def __repr__(self) -> str:
        return f"<DiagnosticSession {self.company}: {self.title}>"
