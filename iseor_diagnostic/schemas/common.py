"""Shared request/response pieces."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class WriteSchema(BaseModel):
    """Base for request bodies.

    Unknown fields (including derived ones such as ``hourly_rate`` or
    ``annual_cost``) are rejected. A blank string means "not provided".
    """

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_strings(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value for key, value in data.items()
                if not (isinstance(value, str) and not value.strip())
            }
        return data


class PartialUpdateSchema(WriteSchema):
    """Base for PUT bodies: omitted fields are untouched, null clears.

    Fields listed in ``non_nullable`` may be omitted but not set to null.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @field_validator("*", mode="before")
    @classmethod
    def reject_null_for_required(cls, value: Any, info) -> Any:
        if value is None and info.field_name in cls.non_nullable:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class MessageResponse(BaseModel):
    message: str
