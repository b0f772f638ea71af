"""Recall-oriented candidate narrowing ahead of exact duplicate scoring."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import ColumnElement, func, literal, or_, select
from sqlalchemy.orm import Session

from crm_dedupe.config import get_settings
from crm_dedupe.duplicates.kinds import EntityKind, MergeableRecord, get_kind_spec
from crm_dedupe.duplicates.similarity import AttributeSet, MatchField, snapshot_attributes

_WORD_PATTERN = re.compile(r"[a-z0-9]+")

SqlMeasure = Callable[[ColumnElement[str], str], ColumnElement[float]]
SqlMatch = Callable[[ColumnElement[str], str], ColumnElement[bool]]

# Stored websites keep protocol and path, so the canonical domain is matched
# against the best-fitting extent of the column instead of the whole string.
_SQL_MEASURES: dict[str, SqlMeasure] = {
    "domain": lambda column, value: func.word_similarity(value, column),
}

# Operator forms of the measures above; only these can use the GIN trigram indexes.
# Their cut-offs come from the pg_trgm thresholds set per transaction.
_SQL_MATCHES: dict[str, SqlMatch] = {
    "domain": lambda column, value: literal(value).op("<%", is_comparison=True)(column),
}


def _trigram_match(column: ColumnElement[str], value: str) -> ColumnElement[bool]:
    return column.op("%", is_comparison=True)(value)


@dataclass(frozen=True, slots=True)
class Candidate:
    id: int
    attributes: AttributeSet
    display_name: str
    display_secondary: str | None
    updated_at: datetime

    @classmethod
    def from_record(cls, record: MergeableRecord) -> Candidate:
        return cls(
            id=record.id,
            attributes=snapshot_attributes(record.match_attributes()),
            display_name=record.display_name,
            display_secondary=record.display_secondary,
            updated_at=record.updated_at,
        )


def trigram_set(value: str) -> set[str]:
    """Trigrams the way pg_trgm extracts them: per word, padded with two leading blanks and one trailing."""

    trigrams: set[str] = set()
    for word in _WORD_PATTERN.findall(value.lower()):
        padded = f"  {word} "
        trigrams.update(padded[index : index + 3] for index in range(len(padded) - 2))
    return trigrams


def trigram_similarity(left: str, right: str) -> float:
    """Shared trigrams over all distinct trigrams, in [0, 1]."""

    left_set = trigram_set(left)
    right_set = trigram_set(right)
    if not left_set or not right_set:
        return 0.0
    return len(left_set & right_set) / len(left_set | right_set)


def prefilter_ratio(threshold: int) -> float:
    """Relaxed 0..1 cut-off derived from a 0..100 scoring threshold."""

    return max(0.0, min(1.0, threshold / 100.0 * get_settings().prefilter_ratio))


def find_candidates(
    db: Session,
    kind: EntityKind,
    attributes: AttributeSet,
    *,
    tenant_id: str,
    threshold: int,
    exclude_id: int | None = None,
    max_candidates: int | None = None,
    matching_fields: Iterable[str] | None = None,
) -> list[Candidate]:
    """Return at most `max_candidates` live records of the tenant that may reach `threshold`.

    Only source attributes that are present contribute to the predicate; a
    candidate qualifies when any of them is similar enough. On PostgreSQL the
    predicate uses the `%` and `<%` operators so the GIN trigram indexes apply.
    Writes nothing; only transaction-local pg_trgm thresholds are set.
    """

    spec = get_kind_spec(kind)
    limit = max(1, max_candidates if max_candidates is not None else get_settings().prefilter_max_candidates)
    present = [
        (field, value)
        for field in spec.weights.restricted_to(matching_fields).fields
        if (value := field.canonical(attributes))
    ]
    if not present:
        return []

    ratio = prefilter_ratio(threshold)
    model = spec.model
    conditions: list[ColumnElement[bool]] = [model.tenant_id == tenant_id, model.merged_into_id.is_(None)]
    if exclude_id is not None:
        conditions.append(model.id != exclude_id)

    if db.get_bind().dialect.name == "postgresql":
        return _find_candidates_sql(db, model, conditions, present, ratio=ratio, limit=limit)
    return _find_candidates_in_memory(db, model, conditions, present, ratio=ratio, limit=limit)


def _find_candidates_sql(
    db: Session,
    model: type[MergeableRecord],
    conditions: list[ColumnElement[bool]],
    present: list[tuple[MatchField, str]],
    *,
    ratio: float,
    limit: int,
) -> list[Candidate]:
    columns = model.match_columns()
    matches = []
    measures = []
    for field, value in present:
        column = columns[field.name]
        matches.append(_SQL_MATCHES.get(field.name, _trigram_match)(column, value))
        measure = _SQL_MEASURES.get(field.name, func.similarity)
        measures.append(measure(func.coalesce(column, ""), value))
    best = measures[0] if len(measures) == 1 else func.greatest(*measures)

    # `%` and `<%` compare against these settings; is_local keeps them to this transaction.
    threshold = str(ratio)
    db.execute(
        select(
            func.set_config("pg_trgm.similarity_threshold", threshold, True),
            func.set_config("pg_trgm.word_similarity_threshold", threshold, True),
        )
    )
    stmt = (
        select(model)
        .where(*conditions, or_(*matches))
        .order_by(best.desc(), model.id.asc())
        .limit(limit)
    )
    return [Candidate.from_record(record) for record in db.scalars(stmt)]


def _find_candidates_in_memory(
    db: Session,
    model: type[MergeableRecord],
    conditions: list[ColumnElement[bool]],
    present: list[tuple[MatchField, str]],
    *,
    ratio: float,
    limit: int,
) -> list[Candidate]:
    scored: list[tuple[float, Candidate]] = []
    for record in db.scalars(select(model).where(*conditions).order_by(model.id.asc())):
        candidate = Candidate.from_record(record)
        best = 0.0
        for field, value in present:
            other = field.canonical(candidate.attributes)
            if other:
                best = max(best, trigram_similarity(value, other))
        if best >= ratio:
            scored.append((best, candidate))
    scored.sort(key=lambda item: (-item[0], item[1].id))
    return [candidate for _, candidate in scored[:limit]]
