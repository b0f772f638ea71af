"""Entity kinds that take part in duplicate detection and merging."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from crm_dedupe.duplicates.similarity import KindWeights, domain_field, email_field, name_field
from crm_dedupe.models.company import Company
from crm_dedupe.models.contact import Contact

MergeableRecord = Contact | Company


class EntityKind(str, Enum):
    CONTACT = "contact"
    COMPANY = "company"


@dataclass(frozen=True, slots=True)
class EntityKindSpec:
    """Binds an entity kind to its model, weights and polymorphic discriminator."""

    kind: EntityKind
    model: type[Contact] | type[Company]
    type_discriminator: str
    weights: KindWeights

    @property
    def default_matching_fields(self) -> list[str]:
        return list(self.weights.field_names)


CONTACT_WEIGHTS = KindWeights((name_field(0.5), email_field(0.5)))
COMPANY_WEIGHTS = KindWeights((name_field(0.6), domain_field(0.4)))

_KIND_SPECS: dict[EntityKind, EntityKindSpec] = {
    EntityKind.CONTACT: EntityKindSpec(
        kind=EntityKind.CONTACT,
        model=Contact,
        type_discriminator="Contact",
        weights=CONTACT_WEIGHTS,
    ),
    EntityKind.COMPANY: EntityKindSpec(
        kind=EntityKind.COMPANY,
        model=Company,
        type_discriminator="Company",
        weights=COMPANY_WEIGHTS,
    ),
}


def get_kind_spec(kind: EntityKind | str) -> EntityKindSpec:
    """Return the kind description; raises ValueError for unknown kinds."""

    return _KIND_SPECS[EntityKind(kind)]
