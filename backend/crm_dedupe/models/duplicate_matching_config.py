"""Per-tenant duplicate matching configuration model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, IdMixin, TenantMixin, utcnow


class DuplicateMatchingConfig(Base, IdMixin, TenantMixin):
    """Detection settings for one entity kind within one tenant."""

    __tablename__ = "duplicate_matching_configs"
    __table_args__ = (
        UniqueConstraint("tenant_id", "entity_kind", name="uq_duplicate_matching_configs_tenant_kind"),
    )

    entity_kind: Mapped[str] = mapped_column(String(32), nullable=False)
    auto_detection_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    similarity_threshold: Mapped[int] = mapped_column(Integer, default=70, nullable=False)
    matching_fields: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )
