"""Schemas for session statistics."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class DomainBucket(BaseModel):
    """Count and annual cost of one ISEOR domain."""

    domain: int
    title: str
    count: int
    annual_cost: Decimal


class FrequencyBucket(BaseModel):
    count: int
    annual_cost: Decimal


class FlagDistribution(BaseModel):
    """How many dysfunctions carry each indicator and component flag."""

    indicators: dict[str, int]
    components: dict[str, int]


class SessionStatisticsResponse(BaseModel):
    """Totals and distributions for one session.

    Optional values are null when not applicable: no ratio without a
    positive scope revenue, no average without dysfunctions.
    """

    session_id: str
    hourly_rate: Decimal | None = None
    dysfunction_count: int
    costed_count: int
    total_annual_cost: Decimal
    cost_to_revenue_ratio: Decimal | None = None
    average_cost_per_dysfunction: Decimal | None = None
    domain_distribution: list[DomainBucket]
    frequency_distribution: dict[str, FrequencyBucket]
    indicator_component_table: dict[str, dict[str, Decimal]]
    flag_distribution: FlagDistribution
    summary: str
