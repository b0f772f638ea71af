"""Contact (person) ORM model."""

from typing import Any

from sqlalchemy import JSON, ColumnElement, ForeignKey, String, Text, func, literal_column
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, IdMixin, MergeStateMixin, TenantMixin, TimestampMixin


class Contact(Base, IdMixin, TenantMixin, TimestampMixin, MergeStateMixin):
    """Person record; mergeable."""

    __tablename__ = "contacts"

    first_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), index=True, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mobile_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    state: Mapped[str | None] = mapped_column(String(128), nullable=True)
    country: Mapped[str | None] = mapped_column(String(128), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    custom_fields: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def display_name(self) -> str:
        return self.full_name

    @property
    def display_secondary(self) -> str | None:
        return self.email

    def match_attributes(self) -> dict[str, str | None]:
        return {"name": self.full_name, "email": self.email}

    @classmethod
    def match_columns(cls) -> dict[str, ColumnElement[str]]:
        """SQL expressions matching the keys of `match_attributes`."""

        # Inline literals so the expression is the one ix_contacts_full_name_trgm indexes.
        blank = literal_column("''")
        full_name = func.trim(
            func.coalesce(cls.first_name, blank) + literal_column("' '") + func.coalesce(cls.last_name, blank)
        )
        return {"name": full_name, "email": cls.email}
