"""Per-tenant duplicate matching settings."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from crm_dedupe.config import get_settings
from crm_dedupe.duplicates.kinds import EntityKind, get_kind_spec
from crm_dedupe.models.duplicate_matching_config import DuplicateMatchingConfig
from crm_dedupe.schemas.duplicate_settings import DuplicateSettingsUpdate


def find_matching_config(db: Session, kind: EntityKind, *, tenant_id: str) -> DuplicateMatchingConfig:
    """Return the stored config for `kind`, or unsaved defaults. Never writes."""

    config = db.scalar(
        select(DuplicateMatchingConfig).where(
            DuplicateMatchingConfig.tenant_id == tenant_id,
            DuplicateMatchingConfig.entity_kind == kind.value,
        )
    )
    if config is not None:
        return config
    return _default_config(kind, tenant_id=tenant_id)


def get_matching_config(db: Session, kind: EntityKind, *, tenant_id: str) -> DuplicateMatchingConfig:
    """Return the tenant's config for `kind`, creating the defaults on first read."""

    config = find_matching_config(db, kind, tenant_id=tenant_id)
    if config.id is not None:
        return config
    db.add(config)
    db.commit()
    db.refresh(config)
    return config


def list_matching_configs(db: Session, *, tenant_id: str) -> list[DuplicateMatchingConfig]:
    return [get_matching_config(db, kind, tenant_id=tenant_id) for kind in EntityKind]


def update_matching_config(
    db: Session,
    kind: EntityKind,
    payload: DuplicateSettingsUpdate,
    *,
    tenant_id: str,
) -> DuplicateMatchingConfig:
    """Apply a partial settings update.

    Matching fields must name fields of the kind; an empty list is rejected
    because it would leave nothing to compare.
    """

    config = get_matching_config(db, kind, tenant_id=tenant_id)
    if payload.matching_fields is not None:
        allowed = get_kind_spec(kind).weights.field_names
        cleaned = list(dict.fromkeys(name.strip().lower() for name in payload.matching_fields if name.strip()))
        unknown = [name for name in cleaned if name not in allowed]
        if unknown:
            raise ValueError(f"Unknown matching fields for {kind.value}: {', '.join(unknown)}.")
        if not cleaned:
            raise ValueError("At least one matching field is required.")
        config.matching_fields = cleaned
    if payload.auto_detection_enabled is not None:
        config.auto_detection_enabled = payload.auto_detection_enabled
    if payload.similarity_threshold is not None:
        config.similarity_threshold = payload.similarity_threshold
    db.commit()
    db.refresh(config)
    return config


def _default_config(kind: EntityKind, *, tenant_id: str) -> DuplicateMatchingConfig:
    return DuplicateMatchingConfig(
        tenant_id=tenant_id,
        entity_kind=kind.value,
        auto_detection_enabled=True,
        similarity_threshold=get_settings().default_similarity_threshold,
        matching_fields=get_kind_spec(kind).default_matching_fields,
    )
