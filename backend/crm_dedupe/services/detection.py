"""Duplicate detection: single-record suggestions and tenant-wide batch scans."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from time import perf_counter

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from crm_dedupe.config import get_settings
from crm_dedupe.duplicates.errors import ScanLimitExceededError
from crm_dedupe.duplicates.kinds import EntityKind, get_kind_spec
from crm_dedupe.duplicates.similarity import AttributeSet, score, snapshot_attributes
from crm_dedupe.schemas.duplicates import DuplicateMatch, DuplicatePair, DuplicateScanPage
from crm_dedupe.services.duplicate_settings import find_matching_config
from crm_dedupe.services.prefilter import Candidate, find_candidates
from crm_dedupe.tenancy import CallerContext

logger = logging.getLogger(__name__)


def find_duplicates_for(
    db: Session,
    kind: EntityKind,
    attributes: AttributeSet,
    *,
    tenant_id: str,
    threshold: int,
    exclude_id: int | None = None,
    matching_fields: Iterable[str] | None = None,
) -> list[DuplicateMatch]:
    """Ranked matches for one attribute set, best first, capped at `detection_max_results`."""

    matching_fields = list(matching_fields) if matching_fields is not None else None
    weights = get_kind_spec(kind).weights.restricted_to(matching_fields)
    source = snapshot_attributes(attributes)
    if not weights.has_comparable_values(source):
        return []

    candidates = find_candidates(
        db,
        kind,
        source,
        tenant_id=tenant_id,
        threshold=threshold,
        exclude_id=exclude_id,
        matching_fields=matching_fields,
    )
    matches: list[DuplicateMatch] = []
    for candidate in candidates:
        candidate_score = score(weights, source, candidate.attributes)
        if candidate_score <= 0 or candidate_score < threshold:
            continue
        matches.append(_to_match(candidate, candidate_score))
    matches.sort(key=lambda match: (-match.score, match.candidate_id))
    return matches[: get_settings().detection_max_results]


def scan_all_duplicates(
    db: Session,
    kind: EntityKind,
    *,
    tenant_id: str,
    threshold: int,
    page: int = 1,
    page_size: int | None = None,
    matching_fields: Iterable[str] | None = None,
) -> DuplicateScanPage:
    """Every pair of live records scoring at or above `threshold`, one page at a time.

    Pairwise over the whole tenant, so cost grows with the square of the record
    count; tenants above `scan_max_records` are refused. Meant for occasional
    administrative sweeps.
    """

    settings = get_settings()
    page_size = page_size if page_size is not None else settings.scan_default_page_size
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive.")

    total_started = perf_counter()
    spec = get_kind_spec(kind)
    model = spec.model
    live = (model.tenant_id == tenant_id, model.merged_into_id.is_(None))

    record_count = db.scalar(select(func.count()).select_from(model).where(*live)) or 0
    if record_count > settings.scan_max_records:
        logger.warning(
            "duplicates.scan_refused tenant_id=%s kind=%s records=%d limit=%d",
            tenant_id,
            kind.value,
            record_count,
            settings.scan_max_records,
        )
        raise ScanLimitExceededError(record_count, settings.scan_max_records)

    started = perf_counter()
    records = list(db.scalars(select(model).where(*live).order_by(model.created_at.asc(), model.id.asc())))
    load_ms = (perf_counter() - started) * 1000.0

    started = perf_counter()
    weights = spec.weights.restricted_to(matching_fields)
    candidates = [
        candidate
        for candidate in (Candidate.from_record(record) for record in records)
        if weights.has_comparable_values(candidate.attributes)
    ]
    pairs: list[DuplicatePair] = []
    for index, left in enumerate(candidates):
        for right in candidates[index + 1 :]:
            pair_score = score(weights, left.attributes, right.attributes)
            if pair_score <= 0 or pair_score < threshold:
                continue
            pairs.append(
                DuplicatePair(
                    match_a=_to_match(left, pair_score),
                    match_b=_to_match(right, pair_score),
                    score=pair_score,
                )
            )
    # Stable: equal scores keep creation order.
    pairs.sort(key=lambda pair: -pair.score)
    scoring_ms = (perf_counter() - started) * 1000.0

    offset = (page - 1) * page_size
    logger.info(
        (
            "duplicates.scan_timing tenant_id=%s kind=%s records=%d pairs=%d "
            "load_ms=%.2f scoring_ms=%.2f total_ms=%.2f"
        ),
        tenant_id,
        kind.value,
        len(records),
        len(pairs),
        load_ms,
        scoring_ms,
        (perf_counter() - total_started) * 1000.0,
    )
    return DuplicateScanPage(
        items=pairs[offset : offset + page_size],
        total_count=len(pairs),
        page=page,
        page_size=page_size,
    )


def check_duplicates(
    db: Session,
    kind: EntityKind,
    attributes: AttributeSet,
    *,
    caller: CallerContext,
    exclude_id: int | None = None,
) -> list[DuplicateMatch]:
    """Single-record detection using the tenant's matching settings; empty when disabled."""

    config = find_matching_config(db, kind, tenant_id=caller.tenant_id)
    if not config.auto_detection_enabled:
        return []
    return find_duplicates_for(
        db,
        kind,
        attributes,
        tenant_id=caller.tenant_id,
        threshold=config.similarity_threshold,
        exclude_id=exclude_id,
        matching_fields=config.matching_fields or None,
    )


def scan_duplicates(
    db: Session,
    kind: EntityKind,
    *,
    caller: CallerContext,
    page: int = 1,
    page_size: int | None = None,
) -> DuplicateScanPage:
    config = find_matching_config(db, kind, tenant_id=caller.tenant_id)
    return scan_all_duplicates(
        db,
        kind,
        tenant_id=caller.tenant_id,
        threshold=config.similarity_threshold,
        page=page,
        page_size=page_size,
        matching_fields=config.matching_fields or None,
    )


def _to_match(candidate: Candidate, match_score: int) -> DuplicateMatch:
    return DuplicateMatch(
        candidate_id=candidate.id,
        display_name=candidate.display_name,
        display_secondary=candidate.display_secondary,
        score=match_score,
        updated_at=candidate.updated_at,
    )
