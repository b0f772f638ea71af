"""Per-tenant duplicate matching settings schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DuplicateSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entity_kind: str
    auto_detection_enabled: bool
    similarity_threshold: int
    matching_fields: list[str]
    updated_at: datetime


class DuplicateSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    auto_detection_enabled: bool | None = None
    similarity_threshold: int | None = Field(default=None, ge=50, le=100)
    matching_fields: list[str] | None = None
