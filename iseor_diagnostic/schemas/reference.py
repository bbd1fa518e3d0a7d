"""Schemas for the reference catalog endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class ReferenceItemResponse(BaseModel):
    """A catalog entry with its guiding questions and default classification."""

    id: str
    code: str
    domain: int
    title: str
    description: str | None = None
    guiding_questions: list[str]
    examples: list[str]
    default_indicators: list[str]
    default_components: list[str]
    display_order: int
    active: bool
    version: str


class ReferenceDomainGroup(BaseModel):
    domain: int
    title: str
    items: list[ReferenceItemResponse]


class ReferenceCatalogResponse(BaseModel):
    total: int
    domains: list[ReferenceDomainGroup]


class ReferenceListResponse(BaseModel):
    count: int
    items: list[ReferenceItemResponse]


class ReferenceInitResponse(BaseModel):
    message: str
    item_count: int
    version: str
