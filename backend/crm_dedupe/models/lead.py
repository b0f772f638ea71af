"""Lead ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, IdMixin, TenantMixin, TimestampMixin


class Lead(Base, IdMixin, TenantMixin, TimestampMixin):
    """Prospect that may have been converted into a contact/company."""

    __tablename__ = "leads"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    converted_contact_id: Mapped[int | None] = mapped_column(
        ForeignKey("contacts.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    converted_company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
