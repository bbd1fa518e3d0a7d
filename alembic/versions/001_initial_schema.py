"""Initial schema: sessions, reference catalog and dysfunctions.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Sessions
    op.create_table(
        "sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("consultant_id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("sector", sa.String(100), nullable=True),
        sa.Column("interview_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("planned_duration_minutes", sa.Integer, server_default="90"),
        sa.Column("status", sa.String(20), nullable=False, server_default="preparation"),
        sa.Column("mode", sa.String(20), nullable=False, server_default="free"),
        sa.Column("participants", sa.JSON, nullable=True),
        sa.Column("preparation_notes", sa.Text, nullable=True),
        sa.Column("conclusion_notes", sa.Text, nullable=True),
        sa.Column("reference_version", sa.String(10), nullable=False, server_default="1.0"),
        sa.Column("scope_revenue", sa.Numeric(18, 2), nullable=True),
        sa.Column("gross_margin_percent", sa.Numeric(5, 2), nullable=True),
        sa.Column("hours_worked_per_year", sa.Integer, nullable=True),
        sa.Column("headcount", sa.Integer, nullable=True),
        sa.Column("hourly_rate", sa.Numeric(18, 6), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("gross_margin_percent BETWEEN 0 AND 100", name="ck_sessions_margin_range"),
    )
    op.create_index("ix_sessions_consultant_id", "sessions", ["consultant_id"])
    op.create_index("ix_sessions_status", "sessions", ["status"])

    # Reference catalog
    op.create_table(
        "reference_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(10), unique=True, nullable=False),
        sa.Column("domain", sa.Integer, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("guiding_questions", sa.JSON, nullable=True),
        sa.Column("examples", sa.JSON, nullable=True),
        sa.Column("default_indicators", sa.JSON, nullable=True),
        sa.Column("default_components", sa.JSON, nullable=True),
        sa.Column("display_order", sa.Integer, server_default="0"),
        sa.Column("active", sa.Boolean, server_default=sa.true()),
        sa.Column("version", sa.String(10), nullable=False, server_default="1.0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("domain BETWEEN 1 AND 6", name="ck_reference_items_domain_range"),
    )
    op.create_index("ix_reference_items_code", "reference_items", ["code"])
    op.create_index("ix_reference_items_domain", "reference_items", ["domain"])

    # Dysfunctions
    op.create_table(
        "dysfunctions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "session_id", sa.String(36),
            sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "reference_item_id", sa.String(36),
            sa.ForeignKey("reference_items.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("frequency", sa.String(20), nullable=False),
        sa.Column("minutes_per_occurrence", sa.Integer, nullable=False),
        sa.Column("people_affected", sa.Integer, nullable=False),
        sa.Column("direct_cost", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("domain", sa.Integer, nullable=True),
        sa.Column("unit_cost", sa.Numeric(18, 6), nullable=True),
        sa.Column("annual_cost", sa.Numeric(18, 6), nullable=True),
        sa.Column("indicator_absenteeism", sa.Boolean, server_default=sa.false()),
        sa.Column("indicator_accidents", sa.Boolean, server_default=sa.false()),
        sa.Column("indicator_turnover", sa.Boolean, server_default=sa.false()),
        sa.Column("indicator_defects", sa.Boolean, server_default=sa.false()),
        sa.Column("indicator_productivity_gaps", sa.Boolean, server_default=sa.false()),
        sa.Column("component_excess_time", sa.Boolean, server_default=sa.false()),
        sa.Column("component_excess_consumption", sa.Boolean, server_default=sa.false()),
        sa.Column("component_overproduction", sa.Boolean, server_default=sa.false()),
        sa.Column("component_non_production", sa.Boolean, server_default=sa.false()),
        sa.Column("entry_mode", sa.String(20), nullable=False, server_default="free"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("validated", sa.Boolean, server_default=sa.false()),
        sa.Column("comments", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("minutes_per_occurrence >= 1", name="ck_dysfunctions_minutes_positive"),
        sa.CheckConstraint("people_affected >= 1", name="ck_dysfunctions_people_positive"),
        sa.CheckConstraint("direct_cost >= 0", name="ck_dysfunctions_direct_cost_non_negative"),
        sa.CheckConstraint("domain IS NULL OR domain BETWEEN 1 AND 6", name="ck_dysfunctions_domain_range"),
    )
    op.create_index("ix_dysfunctions_session_id", "dysfunctions", ["session_id"])
    op.create_index("ix_dysfunctions_domain", "dysfunctions", ["domain"])


def downgrade() -> None:
    op.drop_table("dysfunctions")
    op.drop_table("reference_items")
    op.drop_table("sessions")
