"""Email thread ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, IdMixin, TenantMixin, TimestampMixin


class EmailThread(Base, IdMixin, TenantMixin, TimestampMixin):
    """Conversation grouping of email messages."""

    __tablename__ = "email_threads"

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
