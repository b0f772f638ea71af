"""Reference transfer table: every place a contact or company id is referenced.

Each entity kind owns an ordered tuple of `ReferenceTransfer` descriptors. The
merge orchestrator walks the tuple without knowing any table by name, so a new
referencing table only needs a new entry here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement

from crm_dedupe.duplicates.kinds import EntityKind, get_kind_spec
from crm_dedupe.models.activity_link import ActivityLink
from crm_dedupe.models.attachment import Attachment
from crm_dedupe.models.base import Base
from crm_dedupe.models.contact import Contact
from crm_dedupe.models.deal import Deal
from crm_dedupe.models.deal_contact import DealContact
from crm_dedupe.models.email_message import EmailMessage
from crm_dedupe.models.email_thread import EmailThread
from crm_dedupe.models.feed_item import FeedItem
from crm_dedupe.models.lead import Lead
from crm_dedupe.models.lead_conversion import LeadConversion
from crm_dedupe.models.note import Note
from crm_dedupe.models.notification import Notification
from crm_dedupe.models.quote import Quote
from crm_dedupe.models.support_request import SupportRequest


class TransferKind(str, Enum):
    SIMPLE = "simple"
    POLYMORPHIC = "polymorphic"
    CONFLICT_PRONE = "conflict_prone"


@dataclass(frozen=True, slots=True)
class ReferenceTransfer:
    """How one referencing table is re-pointed from a loser to a survivor.

    `type_column`/`type_value` narrow a generic (entity_type, entity_id) pair to
    one entity kind. `other_side_column` names the second half of the uniqueness
    constraint for conflict-prone references.
    """

    name: str
    model: type[Base]
    column: str
    kind: TransferKind
    type_column: str | None = None
    type_value: str | None = None
    other_side_column: str | None = None

    def __post_init__(self) -> None:
        if (self.type_column is None) != (self.type_value is None):
            raise ValueError(f"{self.name}: type_column and type_value go together.")
        if self.kind is TransferKind.POLYMORPHIC and self.type_column is None:
            raise ValueError(f"{self.name}: polymorphic references need a discriminator.")
        if self.kind is TransferKind.CONFLICT_PRONE and self.other_side_column is None:
            raise ValueError(f"{self.name}: conflict-prone references need other_side_column.")

    @property
    def reference_column(self) -> Any:
        return getattr(self.model, self.column)

    @property
    def other_side(self) -> Any:
        if self.other_side_column is None:
            raise AttributeError(f"{self.name} has no other side column.")
        return getattr(self.model, self.other_side_column)

    def references(self, record_id: int) -> list[ColumnElement[bool]]:
        """WHERE conditions selecting rows that point at `record_id`."""

        conditions: list[ColumnElement[bool]] = [self.reference_column == record_id]
        if self.type_column is not None:
            conditions.append(getattr(self.model, self.type_column) == self.type_value)
        return conditions


def simple(name: str, model: type[Base], column: str) -> ReferenceTransfer:
    return ReferenceTransfer(name=name, model=model, column=column, kind=TransferKind.SIMPLE)


def polymorphic(name: str, model: type[Base], type_value: str) -> ReferenceTransfer:
    return ReferenceTransfer(
        name=name,
        model=model,
        column="entity_id",
        kind=TransferKind.POLYMORPHIC,
        type_column="entity_type",
        type_value=type_value,
    )


def conflict_prone(
    name: str,
    model: type[Base],
    column: str,
    other_side_column: str,
    *,
    type_value: str | None = None,
) -> ReferenceTransfer:
    return ReferenceTransfer(
        name=name,
        model=model,
        column=column,
        kind=TransferKind.CONFLICT_PRONE,
        type_column="entity_type" if type_value is not None else None,
        type_value=type_value,
        other_side_column=other_side_column,
    )


def _shared_polymorphic_entries(type_value: str) -> tuple[ReferenceTransfer, ...]:
    return (
        polymorphic("notes", Note, type_value),
        polymorphic("attachments", Attachment, type_value),
        conflict_prone("activity_links", ActivityLink, "entity_id", "activity_id", type_value=type_value),
        polymorphic("feed_items", FeedItem, type_value),
        polymorphic("notifications", Notification, type_value),
    )


_CONTACT = get_kind_spec(EntityKind.CONTACT).type_discriminator
_COMPANY = get_kind_spec(EntityKind.COMPANY).type_discriminator

REFERENCE_MANIFEST: dict[EntityKind, tuple[ReferenceTransfer, ...]] = {
    EntityKind.CONTACT: (
        conflict_prone("deal_contacts", DealContact, "contact_id", "deal_id"),
        simple("quotes", Quote, "contact_id"),
        simple("requests", SupportRequest, "contact_id"),
        simple("email_messages", EmailMessage, "linked_contact_id"),
        simple("email_threads", EmailThread, "linked_contact_id"),
        simple("leads", Lead, "converted_contact_id"),
        simple("lead_conversions", LeadConversion, "contact_id"),
        *_shared_polymorphic_entries(_CONTACT),
    ),
    EntityKind.COMPANY: (
        simple("contacts", Contact, "company_id"),
        simple("deals", Deal, "company_id"),
        simple("quotes", Quote, "company_id"),
        simple("requests", SupportRequest, "company_id"),
        simple("email_messages", EmailMessage, "linked_company_id"),
        simple("email_threads", EmailThread, "linked_company_id"),
        simple("leads", Lead, "converted_company_id"),
        simple("lead_conversions", LeadConversion, "company_id"),
        *_shared_polymorphic_entries(_COMPANY),
    ),
}


def get_manifest(kind: EntityKind | str) -> tuple[ReferenceTransfer, ...]:
    return REFERENCE_MANIFEST[EntityKind(kind)]
