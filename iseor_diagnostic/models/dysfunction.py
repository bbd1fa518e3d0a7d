"""Dysfunction model — a recurring problem captured during an interview."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from iseor_diagnostic.models.base import Base


class Dysfunction(Base):
    """A dysfunction with its cost inputs, derived costs and classification flags."""

    __tablename__ = "dysfunctions"

    session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reference_item_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("reference_items.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    minutes_per_occurrence: Mapped[int] = mapped_column(Integer, nullable=False)
    people_affected: Mapped[int] = mapped_column(Integer, nullable=False)
    direct_cost: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    domain: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    # Derived by the cost engine; null while the session has no hourly rate
    unit_cost: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)
    annual_cost: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)

    indicator_absenteeism: Mapped[bool] = mapped_column(Boolean, default=False)
    indicator_accidents: Mapped[bool] = mapped_column(Boolean, default=False)
    indicator_turnover: Mapped[bool] = mapped_column(Boolean, default=False)
    indicator_defects: Mapped[bool] = mapped_column(Boolean, default=False)
    indicator_productivity_gaps: Mapped[bool] = mapped_column(Boolean, default=False)

    component_excess_time: Mapped[bool] = mapped_column(Boolean, default=False)
    component_excess_consumption: Mapped[bool] = mapped_column(Boolean, default=False)
    component_overproduction: Mapped[bool] = mapped_column(Boolean, default=False)
    component_non_production: Mapped[bool] = mapped_column(Boolean, default=False)

    entry_mode: Mapped[str] = mapped_column(String(20), nullable=False, default="free")
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    validated: Mapped[bool] = mapped_column(Boolean, default=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Dysfunction {self.id[:8]} session={self.session_id[:8]}>"
