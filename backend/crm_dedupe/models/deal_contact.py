"""Deal-to-contact link model."""

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedupe.models.base import Base, CreatedAtMixin, IdMixin


class DealContact(Base, IdMixin, CreatedAtMixin):
    """At most one link per (deal, contact)."""

    __tablename__ = "deal_contacts"
    __table_args__ = (UniqueConstraint("deal_id", "contact_id", name="uq_deal_contacts_deal_contact"),)

    deal_id: Mapped[int] = mapped_column(ForeignKey("deals.id", ondelete="CASCADE"), index=True, nullable=False)
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("contacts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
