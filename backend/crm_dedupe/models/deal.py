"""Deal ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, IdMixin, TenantMixin, TimestampMixin


class Deal(Base, IdMixin, TenantMixin, TimestampMixin):
    """Sales opportunity, optionally owned by a company."""

    __tablename__ = "deals"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    stage: Mapped[str | None] = mapped_column(String(64), nullable=True)
    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
