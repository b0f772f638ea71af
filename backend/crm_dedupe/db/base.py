"""SQLAlchemy metadata registry import for Alembic."""

from crm_dedupe.models import (
    Activity,
    ActivityLink,
    Attachment,
    Company,
    Contact,
    Deal,
    DealContact,
    DuplicateMatchingConfig,
    EmailMessage,
    EmailThread,
    FeedItem,
    Lead,
    LeadConversion,
    MergeAuditLog,
    Note,
    Notification,
    Quote,
    SupportRequest,
)
from crm_dedupe.models.base import Base

__all__ = [
    "Base",
    "Activity",
    "ActivityLink",
    "Attachment",
    "Company",
    "Contact",
    "Deal",
    "DealContact",
    "DuplicateMatchingConfig",
    "EmailMessage",
    "EmailThread",
    "FeedItem",
    "Lead",
    "LeadConversion",
    "MergeAuditLog",
    "Note",
    "Notification",
    "Quote",
    "SupportRequest",
]
