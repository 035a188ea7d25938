"""Pydantic response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class EntityResponse(BaseModel):
    """Response schema for a single semantic entity."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    mention_text: str = Field(alias="mentionText")
    confidence: float


class FieldResponse(BaseModel):
    """Response schema for a form field; ``None`` marks a missing anchor."""

    name: str | None
    value: str | None


class TableResponse(BaseModel):
    """Response schema for a table grid."""

    headers: list[list[str]]
    body: list[list[str]]


class EntitiesResponse(BaseModel):
    """Entities-only projection of a canonical result."""

    text: str
    entities: list[EntityResponse]


class FieldsResponse(EntitiesResponse):
    """Fields and entities projection of a canonical result."""

    fields: list[FieldResponse]


class CanonicalResponse(FieldsResponse):
    """Full canonical result."""

    tables: list[TableResponse]


class PingResponse(BaseModel):
    message: str


class CapabilitiesResponse(BaseModel):
    """Capabilities that have a processor configured."""

    capabilities: list[str]
