"""Merge request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from crm_dedupe.duplicates.kinds import EntityKind
from crm_dedupe.schemas.records import CompanyRead, ContactRead


class MergeRequest(BaseModel):
    """Caller-chosen survivor, loser and per-field values for one merge."""

    entity_kind: EntityKind
    survivor_id: int = Field(ge=1)
    loser_id: int = Field(ge=1)
    field_selections: dict[str, Any] = Field(default_factory=dict)


class MergeRequestBody(BaseModel):
    """HTTP body for `POST /duplicates/merge/{kind}`; the kind comes from the path."""

    entity_kind: EntityKind | None = None
    survivor_id: int = Field(ge=1)
    loser_id: int = Field(ge=1)
    field_selections: dict[str, Any] = Field(default_factory=dict)


class MergeResult(BaseModel):
    entity_kind: EntityKind
    survivor_id: int
    loser_id: int
    transfer_counts: dict[str, int]
    audit_id: int
    merged_at: datetime


class MergePreview(BaseModel):
    """References the loser holds, per manifest entry, before any write."""

    entity_kind: EntityKind
    survivor_id: int
    loser_id: int
    reference_counts: dict[str, int]
    total_count: int


class MergeAuditLogRead(BaseModel):
    """Serialized merge audit record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: str
    entity_kind: str
    survivor_id: int
    loser_id: int
    performed_by: str
    field_selections: dict[str, Any]
    transfer_counts: dict[str, int]
    performed_at: datetime


class ComparisonRead(BaseModel):
    """Two records of one kind side by side for choosing field values."""

    entity_kind: EntityKind
    record: ContactRead | CompanyRead
    other: ContactRead | CompanyRead
    differing_fields: list[str]
