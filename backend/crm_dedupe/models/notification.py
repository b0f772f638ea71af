"""Polymorphic notification ORM model."""

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, CreatedAtMixin, IdMixin, TenantMixin


class Notification(Base, IdMixin, TenantMixin, CreatedAtMixin):
    """In-app notification for one user, optionally about a record."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_entity", "entity_type", "entity_id"),)

    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    entity_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
