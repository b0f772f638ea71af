"""Executors for reference transfer entries."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from crm_dedupe.duplicates.manifest import ReferenceTransfer, TransferKind


def transfer_references(db: Session, entry: ReferenceTransfer, *, survivor_id: int, loser_id: int) -> int:
    """Re-point every row of `entry` from the loser to the survivor; returns rows moved.

    Conflict-prone rows whose other side is already linked to the survivor are
    deleted instead and are not counted.
    """

    if entry.kind is TransferKind.CONFLICT_PRONE:
        return _transfer_conflict_prone(db, entry, survivor_id=survivor_id, loser_id=loser_id)
    result = db.execute(
        update(entry.model)
        .where(*entry.references(loser_id))
        .values({entry.column: survivor_id})
        .execution_options(synchronize_session=False)
    )
    return int(result.rowcount or 0)


def count_references(db: Session, entry: ReferenceTransfer, record_id: int) -> int:
    return int(db.scalar(select(func.count()).select_from(entry.model).where(*entry.references(record_id))) or 0)


def _transfer_conflict_prone(db: Session, entry: ReferenceTransfer, *, survivor_id: int, loser_id: int) -> int:
    model = entry.model
    other_side = entry.other_side
    held = set(db.scalars(select(other_side).where(*entry.references(survivor_id))))
    loser_rows = list(db.scalars(select(model).where(*entry.references(loser_id)).order_by(model.id.asc())))

    moved = 0
    for row in loser_rows:
        other_id = getattr(row, entry.other_side_column)
        if other_id in held:
            db.delete(row)
            continue
        setattr(row, entry.column, survivor_id)
        held.add(other_id)
        moved += 1
    db.flush()
    return moved
