"""Merge audit log model."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, IdMixin, TenantMixin, utcnow


class MergeAuditLog(Base, IdMixin, TenantMixin):
    """Append-only record of one committed merge; written inside the merge transaction."""

    __tablename__ = "merge_audit_logs"
    __table_args__ = (Index("ix_merge_audit_logs_tenant_kind", "tenant_id", "entity_kind"),)

    entity_kind: Mapped[str] = mapped_column(String(32), nullable=False)
    survivor_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    loser_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    performed_by: Mapped[str] = mapped_column(String(64), nullable=False)
    field_selections: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    transfer_counts: Mapped[dict[str, int]] = mapped_column(JSON, default=dict, nullable=False)
    performed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
