"""Polymorphic attachment ORM model."""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, CreatedAtMixin, IdMixin, TenantMixin


class Attachment(Base, IdMixin, TenantMixin, CreatedAtMixin):
    """Uploaded file attached to any record via (entity_type, entity_id)."""

    __tablename__ = "attachments"
    __table_args__ = (Index("ix_attachments_entity", "entity_type", "entity_id"),)

    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
