"""Duplicate detection and merge routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from crm_dedupe.db.dependencies import get_caller, get_db
from crm_dedupe.duplicates.errors import (
    AlreadyMergedError,
    InvalidMergeRequestError,
    MergeError,
    RecordNotFoundError,
    ScanLimitExceededError,
)
from crm_dedupe.duplicates.kinds import EntityKind
from crm_dedupe.schemas.common import ApiResponse, ErrorDetail
from crm_dedupe.schemas.duplicates import (
    CompanyDuplicateCheck,
    ContactDuplicateCheck,
    DuplicateMatch,
    DuplicateScanPage,
)
from crm_dedupe.schemas.merge import (
    ComparisonRead,
    MergeAuditLogRead,
    MergePreview,
    MergeRequest,
    MergeRequestBody,
    MergeResult,
)
from crm_dedupe.services.detection import check_duplicates, scan_duplicates
from crm_dedupe.services.merge import get_comparison, list_merge_audits, merge_records, preview_merge
from crm_dedupe.tenancy import CallerContext

router = APIRouter(prefix="/duplicates")

_STATUS_BY_ERROR: tuple[tuple[type[MergeError], int], ...] = (
    (RecordNotFoundError, 404),
    (InvalidMergeRequestError, 400),
    (AlreadyMergedError, 409),
)


def _http_error(exc: MergeError) -> HTTPException:
    status_code = next((code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)), 500)
    return HTTPException(
        status_code=status_code,
        detail=ErrorDetail(kind=exc.kind, reason=exc.reason).model_dump(),
    )


@router.post("/check/contacts", response_model=ApiResponse[list[DuplicateMatch]])
def check_contact_duplicates(
    payload: ContactDuplicateCheck,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[list[DuplicateMatch]]:
    """Suggest existing contacts resembling the one being entered."""

    matches = check_duplicates(
        db,
        EntityKind.CONTACT,
        payload.attributes(),
        caller=caller,
        exclude_id=payload.exclude_id,
    )
    return ApiResponse(data=matches)


@router.post("/check/companies", response_model=ApiResponse[list[DuplicateMatch]])
def check_company_duplicates(
    payload: CompanyDuplicateCheck,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[list[DuplicateMatch]]:
    """Suggest existing companies resembling the one being entered."""

    matches = check_duplicates(
        db,
        EntityKind.COMPANY,
        payload.attributes(),
        caller=caller,
        exclude_id=payload.exclude_id,
    )
    return ApiResponse(data=matches)


@router.get("/scan/{kind}", response_model=ApiResponse[DuplicateScanPage])
def scan(
    kind: EntityKind = Path(...),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[DuplicateScanPage]:
    """Tenant-wide duplicate pairs, best first. Quadratic in record count."""

    try:
        result = scan_duplicates(db, kind, caller=caller, page=page, page_size=page_size)
    except ScanLimitExceededError as exc:
        raise HTTPException(
            status_code=422,
            detail=ErrorDetail(kind="scan_limit_exceeded", reason=str(exc)).model_dump(),
        ) from exc
    return ApiResponse(data=result)


@router.get("/merge-preview/{kind}", response_model=ApiResponse[MergePreview])
def merge_preview(
    kind: EntityKind = Path(...),
    survivor_id: int = Query(..., ge=1),
    loser_id: int = Query(..., ge=1),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[MergePreview]:
    """Count the references a merge would move, without writing."""

    try:
        preview = preview_merge(db, kind, survivor_id, loser_id, caller=caller)
    except MergeError as exc:
        raise _http_error(exc) from exc
    return ApiResponse(data=preview)


@router.post("/merge/{kind}", response_model=ApiResponse[MergeResult])
def merge(
    payload: MergeRequestBody,
    kind: EntityKind = Path(...),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[MergeResult]:
    """Fold the loser into the survivor. Irreversible."""

    if payload.entity_kind is not None and payload.entity_kind != kind:
        raise _http_error(InvalidMergeRequestError("Survivor and loser must be of the path's entity kind."))
    request = MergeRequest(
        entity_kind=kind,
        survivor_id=payload.survivor_id,
        loser_id=payload.loser_id,
        field_selections=payload.field_selections,
    )
    try:
        result = merge_records(db, request, caller=caller)
    except MergeError as exc:
        raise _http_error(exc) from exc
    return ApiResponse(data=result)


@router.get("/merge-audits", response_model=ApiResponse[list[MergeAuditLogRead]])
def merge_audits(
    entity_kind: EntityKind | None = Query(default=None),
    record_id: int | None = Query(default=None, ge=1),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[list[MergeAuditLogRead]]:
    """Merge history of the caller's tenant, newest first."""

    rows = list_merge_audits(
        db,
        tenant_id=caller.tenant_id,
        entity_kind=entity_kind,
        record_id=record_id,
        limit=limit,
    )
    return ApiResponse(data=[MergeAuditLogRead.model_validate(row) for row in rows])


@router.get("/{kind}/{record_id}/comparison", response_model=ApiResponse[ComparisonRead])
def comparison(
    kind: EntityKind = Path(...),
    record_id: int = Path(..., ge=1),
    other_id: int = Query(..., ge=1),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[ComparisonRead]:
    """Two records side by side for choosing field values before a merge."""

    try:
        result = get_comparison(db, kind, record_id, other_id, caller=caller)
    except MergeError as exc:
        raise _http_error(exc) from exc
    return ApiResponse(data=result)
