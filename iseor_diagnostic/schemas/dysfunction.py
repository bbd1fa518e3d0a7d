"""Schemas for dysfunction endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from iseor_diagnostic.enums import Component, EntryMode, Frequency, Indicator, Priority
from iseor_diagnostic.schemas.common import PartialUpdateSchema, WriteSchema


def _direct_cost_default(value: Any) -> Any:
    return Decimal("0") if value is None else value


class DysfunctionCreate(WriteSchema):
    """A dysfunction captured during an interview."""

    session_id: str = Field(..., min_length=1)
    reference_item_id: str | None = None
    description: str = Field(..., min_length=1)
    frequency: Frequency
    minutes_per_occurrence: int = Field(..., ge=1, strict=True)
    people_affected: int = Field(..., ge=1, strict=True)
    direct_cost: Decimal = Field(default=Decimal("0"), ge=0)
    domain: int | None = Field(default=None, ge=1, le=6, strict=True)

    indicator_absenteeism: bool = False
    indicator_accidents: bool = False
    indicator_turnover: bool = False
    indicator_defects: bool = False
    indicator_productivity_gaps: bool = False

    component_excess_time: bool = False
    component_excess_consumption: bool = False
    component_overproduction: bool = False
    component_non_production: bool = False

    entry_mode: EntryMode = EntryMode.FREE
    priority: Priority = Priority.MEDIUM
    validated: bool = False
    comments: str | None = None

    default_direct_cost = field_validator("direct_cost", mode="before")(_direct_cost_default)


class DysfunctionUpdate(PartialUpdateSchema):
    """Partial dysfunction update; the owning session cannot change."""

    non_nullable: ClassVar[tuple[str, ...]] = (
        "description",
        "frequency",
        "minutes_per_occurrence",
        "people_affected",
        "indicator_absenteeism",
        "indicator_accidents",
        "indicator_turnover",
        "indicator_defects",
        "indicator_productivity_gaps",
        "component_excess_time",
        "component_excess_consumption",
        "component_overproduction",
        "component_non_production",
        "entry_mode",
        "priority",
        "validated",
    )

    reference_item_id: str | None = None
    description: str | None = Field(default=None, min_length=1)
    frequency: Frequency | None = None
    minutes_per_occurrence: int | None = Field(default=None, ge=1, strict=True)
    people_affected: int | None = Field(default=None, ge=1, strict=True)
    direct_cost: Decimal | None = Field(default=None, ge=0)
    domain: int | None = Field(default=None, ge=1, le=6, strict=True)

    indicator_absenteeism: bool | None = None
    indicator_accidents: bool | None = None
    indicator_turnover: bool | None = None
    indicator_defects: bool | None = None
    indicator_productivity_gaps: bool | None = None

    component_excess_time: bool | None = None
    component_excess_consumption: bool | None = None
    component_overproduction: bool | None = None
    component_non_production: bool | None = None

    entry_mode: EntryMode | None = None
    priority: Priority | None = None
    validated: bool | None = None
    comments: str | None = None

    default_direct_cost = field_validator("direct_cost", mode="before")(_direct_cost_default)


class ClassifyRequest(WriteSchema):
    """Replace a dysfunction's flags with the listed ones and/or set its domain.

    A list that is sent sets every flag of its kind: listed flags on, the
    rest off. An omitted list leaves that kind of flag untouched.
    """

    indicators: list[Indicator] | None = None
    components: list[Component] | None = None
    domain: int | None = Field(default=None, ge=1, le=6, strict=True)


class BulkCreateRequest(WriteSchema):
    session_id: str = Field(..., min_length=1)
    reference_item_ids: list[str] = Field(..., min_length=1)


class DysfunctionResponse(BaseModel):
    """A dysfunction with its derived costs."""

    id: str
    session_id: str
    reference_item_id: str | None = None
    description: str
    frequency: str
    minutes_per_occurrence: int
    people_affected: int
    direct_cost: Decimal
    domain: int | None = None
    unit_cost: Decimal | None = None
    annual_cost: Decimal | None = None

    indicator_absenteeism: bool
    indicator_accidents: bool
    indicator_turnover: bool
    indicator_defects: bool
    indicator_productivity_gaps: bool

    component_excess_time: bool
    component_excess_consumption: bool
    component_overproduction: bool
    component_non_production: bool

    entry_mode: str
    priority: str
    validated: bool
    comments: str | None = None
    created_at: datetime
    updated_at: datetime


class DysfunctionListResponse(BaseModel):
    session_id: str
    count: int
    dysfunctions: list[DysfunctionResponse]


class BulkCreateResponse(BaseModel):
    """Dysfunctions created from catalog items, plus the ids that matched nothing."""

    session_id: str
    created_count: int
    dysfunctions: list[DysfunctionResponse]
    skipped_ids: list[str]
