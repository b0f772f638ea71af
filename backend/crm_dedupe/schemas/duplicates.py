"""Duplicate detection request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class DuplicateMatch(BaseModel):
    """One probable duplicate of a source record; a query result, never persisted."""

    candidate_id: int
    display_name: str
    display_secondary: str | None = None
    score: int = Field(ge=0, le=100)
    updated_at: datetime


class DuplicatePair(BaseModel):
    """Two live records of one kind scoring at or above the threshold."""

    match_a: DuplicateMatch
    match_b: DuplicateMatch
    score: int = Field(ge=0, le=100)


class DuplicateScanPage(BaseModel):
    items: list[DuplicatePair]
    total_count: int
    page: int
    page_size: int


class ContactDuplicateCheck(BaseModel):
    """Attributes of a contact being typed or edited."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    exclude_id: int | None = Field(default=None, ge=1)

    def attributes(self) -> dict[str, str | None]:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return {"name": full_name or None, "email": self.email}


class CompanyDuplicateCheck(BaseModel):
    """Attributes of a company being typed or edited."""

    name: str | None = None
    website: str | None = None
    exclude_id: int | None = Field(default=None, ge=1)

    def attributes(self) -> dict[str, str | None]:
        return {"name": self.name, "domain": self.website}
