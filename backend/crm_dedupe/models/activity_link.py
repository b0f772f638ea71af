"""Polymorphic activity link model."""

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, CreatedAtMixin, IdMixin


class ActivityLink(Base, IdMixin, CreatedAtMixin):
    """At most one link per (activity, entity_type, entity_id)."""

    __tablename__ = "activity_links"
    __table_args__ = (
        UniqueConstraint("activity_id", "entity_type", "entity_id", name="uq_activity_links_activity_entity"),
    )

    activity_id: Mapped[int] = mapped_column(
        ForeignKey("activities.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
