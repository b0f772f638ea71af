"""Contact and company response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class ContactRead(BaseModel):
    """Serialized contact, merge state included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: str
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    mobile_phone: str | None
    job_title: str | None
    department: str | None
    address: str | None
    city: str | None
    state: str | None
    country: str | None
    postal_code: str | None
    description: str | None
    company_id: int | None
    owner_id: str | None
    custom_fields: dict[str, Any]
    merged_into_id: int | None
    merged_at: datetime | None
    merged_by_user_id: str | None
    created_at: datetime
    updated_at: datetime


class CompanyRead(BaseModel):
    """Serialized company, merge state included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: str
    name: str
    industry: str | None
    website: str | None
    phone: str | None
    email: str | None
    address: str | None
    city: str | None
    state: str | None
    country: str | None
    postal_code: str | None
    size: str | None
    description: str | None
    owner_id: str | None
    custom_fields: dict[str, Any]
    merged_into_id: int | None
    merged_at: datetime | None
    merged_by_user_id: str | None
    created_at: datetime
    updated_at: datetime
