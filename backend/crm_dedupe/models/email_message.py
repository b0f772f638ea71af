"""Synced email message ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, CreatedAtMixin, IdMixin, TenantMixin


class EmailMessage(Base, IdMixin, TenantMixin, CreatedAtMixin):
    """Email message auto-linked to CRM records."""

    __tablename__ = "email_messages"

    subject: Mapped[str] = mapped_column(String(512), default="", nullable=False)
    linked_contact_id: Mapped[int | None] = mapped_column(
        ForeignKey("contacts.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    linked_company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
