"""Merge orchestration: one confirmed duplicate pair folded into a survivor."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from time import perf_counter
from typing import Any

from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crm_dedupe.duplicates.errors import (
    AlreadyMergedError,
    InvalidMergeRequestError,
    MergeError,
    RecordNotFoundError,
    TransferFailureError,
)
from crm_dedupe.duplicates.field_setters import apply_field_selections, normalize_field_key
from crm_dedupe.duplicates.kinds import EntityKind, MergeableRecord, get_kind_spec
from crm_dedupe.duplicates.manifest import get_manifest
from crm_dedupe.models.base import utcnow
from crm_dedupe.models.company import Company
from crm_dedupe.models.merge_audit_log import MergeAuditLog
from crm_dedupe.schemas.merge import ComparisonRead, MergePreview, MergeRequest, MergeResult
from crm_dedupe.schemas.records import CompanyRead, ContactRead
from crm_dedupe.services.reference_transfer import count_references, transfer_references
from crm_dedupe.tenancy import CallerContext

logger = logging.getLogger(__name__)

_READ_SCHEMAS: dict[EntityKind, type[ContactRead] | type[CompanyRead]] = {
    EntityKind.CONTACT: ContactRead,
    EntityKind.COMPANY: CompanyRead,
}

# Bookkeeping columns never offered as a field choice.
_NON_SELECTABLE_FIELDS = frozenset(
    {
        "id",
        "tenant_id",
        "custom_fields",
        "merged_into_id",
        "merged_at",
        "merged_by_user_id",
        "created_at",
        "updated_at",
    }
)


def merge_records(db: Session, request: MergeRequest, *, caller: CallerContext) -> MergeResult:
    """Merge `request.loser_id` into `request.survivor_id` as one transaction.

    Applies field selections to the survivor, re-points every manifest
    reference, marks the loser merged and appends the audit row. Any failure
    rolls the whole unit back and re-raises.
    """

    total_started = perf_counter()
    kind = request.entity_kind
    try:
        survivor, loser = _load_pair(
            db,
            kind,
            request.survivor_id,
            request.loser_id,
            caller=caller,
            lock=True,
        )
        apply_field_selections(kind, survivor, request.field_selections)
        if kind is EntityKind.CONTACT and _selects_company(request.field_selections):
            _check_company_reference(db, survivor.company_id, caller=caller)

        transfer_counts: dict[str, int] = {}
        for entry in get_manifest(kind):
            try:
                transfer_counts[entry.name] = transfer_references(
                    db,
                    entry,
                    survivor_id=survivor.id,
                    loser_id=loser.id,
                )
            except SQLAlchemyError as exc:
                raise TransferFailureError(
                    f"Transferring {entry.name} references failed: {exc.__class__.__name__}.",
                    entry_name=entry.name,
                ) from exc

        merged_at = utcnow()
        loser.merged_into_id = survivor.id
        loser.merged_at = merged_at
        loser.merged_by_user_id = caller.user_id

        audit = MergeAuditLog(
            tenant_id=caller.tenant_id,
            entity_kind=kind.value,
            survivor_id=survivor.id,
            loser_id=loser.id,
            performed_by=caller.user_id,
            field_selections=dict(request.field_selections),
            transfer_counts=transfer_counts,
            performed_at=merged_at,
        )
        db.add(audit)
        try:
            db.flush()
        except SQLAlchemyError as exc:
            raise TransferFailureError(
                f"Writing the merged records failed: {exc.__class__.__name__}."
            ) from exc
        result = MergeResult(
            entity_kind=kind,
            survivor_id=survivor.id,
            loser_id=loser.id,
            transfer_counts=transfer_counts,
            audit_id=audit.id,
            merged_at=merged_at,
        )
        db.commit()
    except MergeError as exc:
        db.rollback()
        logger.warning(
            "duplicates.merge_rejected tenant_id=%s kind=%s survivor_id=%s loser_id=%s reason_kind=%s reason=%s",
            caller.tenant_id,
            kind.value,
            request.survivor_id,
            request.loser_id,
            exc.kind,
            exc.reason,
        )
        raise
    except Exception:
        db.rollback()
        logger.exception(
            "duplicates.merge_failed tenant_id=%s kind=%s survivor_id=%s loser_id=%s elapsed_ms=%.2f",
            caller.tenant_id,
            kind.value,
            request.survivor_id,
            request.loser_id,
            (perf_counter() - total_started) * 1000.0,
        )
        raise

    logger.info(
        (
            "duplicates.merge_committed tenant_id=%s kind=%s survivor_id=%d loser_id=%d "
            "audit_id=%d transferred=%d total_ms=%.2f"
        ),
        caller.tenant_id,
        kind.value,
        result.survivor_id,
        result.loser_id,
        result.audit_id,
        sum(result.transfer_counts.values()),
        (perf_counter() - total_started) * 1000.0,
    )
    return result


def preview_merge(
    db: Session,
    kind: EntityKind,
    survivor_id: int,
    loser_id: int,
    *,
    caller: CallerContext,
) -> MergePreview:
    """Validate a prospective merge and count what the loser would hand over. Read-only."""

    _, loser = _load_pair(db, kind, survivor_id, loser_id, caller=caller, lock=False)
    reference_counts = {entry.name: count_references(db, entry, loser.id) for entry in get_manifest(kind)}
    return MergePreview(
        entity_kind=kind,
        survivor_id=survivor_id,
        loser_id=loser_id,
        reference_counts=reference_counts,
        total_count=sum(reference_counts.values()),
    )


def get_comparison(
    db: Session,
    kind: EntityKind,
    record_id: int,
    other_id: int,
    *,
    caller: CallerContext,
) -> ComparisonRead:
    """Both records side by side, merged ones included, with the fields that differ."""

    if record_id == other_id:
        raise InvalidMergeRequestError("A record cannot be compared with itself.")
    model = get_kind_spec(kind).model
    rows = {
        row.id: row
        for row in db.scalars(
            select(model).where(model.id.in_((record_id, other_id)), model.tenant_id == caller.tenant_id)
        )
    }
    for wanted in (record_id, other_id):
        if wanted not in rows:
            raise RecordNotFoundError(f"{kind.value} {wanted} was not found.")

    read_schema = _READ_SCHEMAS[kind]
    record = read_schema.model_validate(rows[record_id])
    other = read_schema.model_validate(rows[other_id])
    return ComparisonRead(
        entity_kind=kind,
        record=record,
        other=other,
        differing_fields=_differing_fields(record, other),
    )


def list_merge_audits(
    db: Session,
    *,
    tenant_id: str,
    entity_kind: EntityKind | None = None,
    record_id: int | None = None,
    limit: int = 100,
) -> list[MergeAuditLog]:
    """Merge history for a tenant, newest first."""

    conditions = [MergeAuditLog.tenant_id == tenant_id]
    if entity_kind is not None:
        conditions.append(MergeAuditLog.entity_kind == entity_kind.value)
    if record_id is not None:
        conditions.append(or_(MergeAuditLog.survivor_id == record_id, MergeAuditLog.loser_id == record_id))
    return list(
        db.scalars(
            select(MergeAuditLog)
            .where(*conditions)
            .order_by(MergeAuditLog.performed_at.desc(), MergeAuditLog.id.desc())
            .limit(max(1, limit))
        )
    )


def _load_pair(
    db: Session,
    kind: EntityKind,
    survivor_id: int,
    loser_id: int,
    *,
    caller: CallerContext,
    lock: bool,
) -> tuple[MergeableRecord, MergeableRecord]:
    if survivor_id == loser_id:
        raise InvalidMergeRequestError("Survivor and loser must be different records.")

    model = get_kind_spec(kind).model
    # Merged rows are loaded too so a repeated merge is rejected instead of ignored.
    stmt = select(model).where(model.id.in_((survivor_id, loser_id))).order_by(model.id.asc())
    if lock:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    rows = {row.id: row for row in db.scalars(stmt)}

    survivor = rows.get(survivor_id)
    if survivor is None:
        raise RecordNotFoundError(f"Survivor {kind.value} {survivor_id} was not found.")
    loser = rows.get(loser_id)
    if loser is None:
        raise RecordNotFoundError(f"Loser {kind.value} {loser_id} was not found.")
    if survivor.tenant_id != caller.tenant_id or loser.tenant_id != caller.tenant_id:
        raise InvalidMergeRequestError("Both records must belong to the caller's tenant.")
    if survivor.is_merged:
        raise AlreadyMergedError(f"Survivor {kind.value} {survivor_id} was already merged into {survivor.merged_into_id}.")
    if loser.is_merged:
        raise AlreadyMergedError(f"Loser {kind.value} {loser_id} was already merged into {loser.merged_into_id}.")
    return survivor, loser


def _differing_fields(record: BaseModel, other: BaseModel) -> list[str]:
    left = record.model_dump()
    right = other.model_dump()
    return [name for name in left if name not in _NON_SELECTABLE_FIELDS and left[name] != right.get(name)]


def _selects_company(selections: Mapping[str, Any]) -> bool:
    return any(normalize_field_key(key) == "companyid" for key in selections)


def _check_company_reference(db: Session, company_id: int | None, *, caller: CallerContext) -> None:
    """A chosen company must be a live company of the caller's tenant."""

    if company_id is None:
        return
    company = db.scalar(
        select(Company).where(
            Company.id == company_id,
            Company.tenant_id == caller.tenant_id,
            Company.merged_into_id.is_(None),
        )
    )
    if company is None:
        raise InvalidMergeRequestError(f"Company {company_id} is not an active company of this tenant.")
