"""Activity ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, IdMixin, TenantMixin, TimestampMixin


class Activity(Base, IdMixin, TenantMixin, TimestampMixin):
    """Task, call or meeting; linked to records through activity_links."""

    __tablename__ = "activities"

    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    activity_type: Mapped[str] = mapped_column(String(32), default="task", nullable=False)
