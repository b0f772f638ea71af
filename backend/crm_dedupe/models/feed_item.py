"""Polymorphic feed item ORM model."""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, CreatedAtMixin, IdMixin, TenantMixin


class FeedItem(Base, IdMixin, TenantMixin, CreatedAtMixin):
    """Activity feed post, optionally about a record."""

    __tablename__ = "feed_items"
    __table_args__ = (Index("ix_feed_items_entity", "entity_type", "entity_id"),)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    entity_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
