"""Caller identity threaded explicitly through every service call."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallerContext:
    """Tenant and acting user supplied by the caller; never read from globals."""

    tenant_id: str
    user_id: str
