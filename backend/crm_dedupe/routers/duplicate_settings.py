"""Per-tenant duplicate matching settings routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from crm_dedupe.db.dependencies import get_caller, get_db
from crm_dedupe.duplicates.kinds import EntityKind
from crm_dedupe.schemas.common import ApiResponse
from crm_dedupe.schemas.duplicate_settings import DuplicateSettingsRead, DuplicateSettingsUpdate
from crm_dedupe.services.duplicate_settings import (
    get_matching_config,
    list_matching_configs,
    update_matching_config,
)
from crm_dedupe.tenancy import CallerContext

router = APIRouter(prefix="/duplicate-settings")


@router.get("", response_model=ApiResponse[list[DuplicateSettingsRead]])
def list_settings(
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[list[DuplicateSettingsRead]]:
    """Matching settings for every entity kind."""

    configs = list_matching_configs(db, tenant_id=caller.tenant_id)
    return ApiResponse(data=[DuplicateSettingsRead.model_validate(config) for config in configs])


@router.get("/{kind}", response_model=ApiResponse[DuplicateSettingsRead])
def read_settings(
    kind: EntityKind = Path(...),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[DuplicateSettingsRead]:
    config = get_matching_config(db, kind, tenant_id=caller.tenant_id)
    return ApiResponse(data=DuplicateSettingsRead.model_validate(config))


@router.put("/{kind}", response_model=ApiResponse[DuplicateSettingsRead])
def write_settings(
    payload: DuplicateSettingsUpdate,
    kind: EntityKind = Path(...),
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller),
) -> ApiResponse[DuplicateSettingsRead]:
    """Partially update one kind's matching settings."""

    try:
        config = update_matching_config(db, kind, payload, tenant_id=caller.tenant_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ApiResponse(data=DuplicateSettingsRead.model_validate(config))
