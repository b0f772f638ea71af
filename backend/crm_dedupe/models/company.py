"""Company (organization) ORM model."""

from typing import Any

from sqlalchemy import JSON, ColumnElement, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, IdMixin, MergeStateMixin, TenantMixin, TimestampMixin


class Company(Base, IdMixin, TenantMixin, TimestampMixin, MergeStateMixin):
    """Organization record; mergeable."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    website: Mapped[str | None] = mapped_column(String(512), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    state: Mapped[str | None] = mapped_column(String(128), nullable=True)
    country: Mapped[str | None] = mapped_column(String(128), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    size: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    custom_fields: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def display_secondary(self) -> str | None:
        return self.website

    def match_attributes(self) -> dict[str, str | None]:
        return {"name": self.name, "domain": self.website}

    @classmethod
    def match_columns(cls) -> dict[str, ColumnElement[str]]:
        """SQL expressions matching the keys of `match_attributes`."""

        return {"name": cls.name, "domain": cls.website}
