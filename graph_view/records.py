"""Validation schema for raw query records.

Raw nodes and relationships come either from the sample data generator or from
the backend query service. Both are validated here before normalization.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_identifier(value: Any) -> Any:
    """Accept integer identifiers but keep everything else for validation."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class RawNode(BaseModel):
    """Schema for a raw node record."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "element_id", "elementId"))
    labels: list[str] = Field(default_factory=list)
    properties: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _as_identifier(v)

    @field_validator("labels", mode="before")
    @classmethod
    def coerce_labels(cls, v: Any) -> Any:
        # A single label is sometimes sent as a bare string
        if isinstance(v, str):
            return [v]
        if v is None:
            return []
        return v

    @field_validator("properties", mode="before")
    @classmethod
    def coerce_properties(cls, v: Any) -> Any:
        return {} if v is None else v


class RawRelationship(BaseModel):
    """Schema for a raw relationship record."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "element_id", "elementId"))
    type: str = Field(min_length=1)
    from_id: str = Field(min_length=1, validation_alias=AliasChoices("from", "start", "source", "start_node_element_id"))
    to_id: str = Field(min_length=1, validation_alias=AliasChoices("to", "end", "target", "end_node_element_id"))
    properties: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "from_id", "to_id", mode="before")
    @classmethod
    def coerce_identifiers(cls, v: Any) -> Any:
        return _as_identifier(v)

    @field_validator("properties", mode="before")
    @classmethod
    def coerce_properties(cls, v: Any) -> Any:
        return {} if v is None else v
