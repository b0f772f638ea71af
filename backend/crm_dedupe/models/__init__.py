"""ORM models package exports."""

from crm_dedupe.models.activity import Activity
from crm_dedupe.models.activity_link import ActivityLink
from crm_dedupe.models.attachment import Attachment
from crm_dedupe.models.company import Company
from crm_dedupe.models.contact import Contact
from crm_dedupe.models.deal import Deal
from crm_dedupe.models.deal_contact import DealContact
from crm_dedupe.models.duplicate_matching_config import DuplicateMatchingConfig
from crm_dedupe.models.email_message import EmailMessage
from crm_dedupe.models.email_thread import EmailThread
from crm_dedupe.models.feed_item import FeedItem
from crm_dedupe.models.lead import Lead
from crm_dedupe.models.lead_conversion import LeadConversion
from crm_dedupe.models.merge_audit_log import MergeAuditLog
from crm_dedupe.models.note import Note
from crm_dedupe.models.notification import Notification
from crm_dedupe.models.quote import Quote
from crm_dedupe.models.support_request import SupportRequest

__all__ = [
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
