"""FastAPI dependencies for database sessions and caller identity."""

from collections.abc import Iterator

from fastapi import Header
from sqlalchemy.orm import Session

from crm_dedupe.db.session import SessionLocal
from crm_dedupe.tenancy import CallerContext


def get_db() -> Iterator[Session]:
    """Yield one session per request and always close it."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_caller(
    x_tenant_id: str = Header(..., min_length=1),
    x_user_id: str = Header(..., min_length=1),
) -> CallerContext:
    """Build the explicit caller context from request headers."""

    return CallerContext(tenant_id=x_tenant_id.strip(), user_id=x_user_id.strip())
