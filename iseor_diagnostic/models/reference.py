"""Reference catalog model — the official ISEOR dysfunction templates."""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from iseor_diagnostic.models.base import Base


class ReferenceItem(Base):
    """A catalog entry a consultant can pre-fill dysfunctions from."""

    __tablename__ = "reference_items"

    code: Mapped[str] = mapped_column(String(10), nullable=False, unique=True, index=True)
    domain: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    guiding_questions: Mapped[list] = mapped_column(JSON, default=list)
    examples: Mapped[list] = mapped_column(JSON, default=list)
    default_indicators: Mapped[list] = mapped_column(JSON, default=list)
    default_components: Mapped[list] = mapped_column(JSON, default=list)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    version: Mapped[str] = mapped_column(String(10), nullable=False, default="1.0")

    def __repr__(self) -> str:
        return f"<ReferenceItem {self.code}>"
