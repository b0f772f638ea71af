"""Seed a demo tenant with near-duplicate contacts and companies.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import delete, select

# Make `crm_dedupe` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from crm_dedupe.db.session import SessionLocal
from crm_dedupe.duplicates.kinds import EntityKind
from crm_dedupe.models import (
    Activity,
    ActivityLink,
    Company,
    Contact,
    Deal,
    DealContact,
    DuplicateMatchingConfig,
    MergeAuditLog,
    Note,
    Quote,
)
from crm_dedupe.services.detection import scan_all_duplicates


DEFAULT_TENANT_ID = "demo-tenant"

DEMO_COMPANIES = [
    ("Acme Inc", "acme.com"),
    ("ACME, Inc.", "https://www.acme.com/about"),
    ("Globex Corporation", "globex.com"),
    ("Globex Corp", "www.globex.com"),
    ("Initech", "initech.io"),
]

DEMO_CONTACTS = [
    ("John", "Smith", "john.smith@acme.com", 0),
    ("Jon", "Smith", "John.Smith@acme.com", 1),
    ("Smith", "John", None, 0),
    ("Hank", "Scorpio", "hank@globex.com", 2),
    ("Peter", "Gibbons", "peter@initech.io", 4),
]


def reset_tenant(db, tenant_id: str) -> None:
    """Remove existing demo records for the tenant."""

    deal_ids = select(Deal.id).where(Deal.tenant_id == tenant_id)
    activity_ids = select(Activity.id).where(Activity.tenant_id == tenant_id)
    db.execute(delete(DealContact).where(DealContact.deal_id.in_(deal_ids)))
    db.execute(delete(ActivityLink).where(ActivityLink.activity_id.in_(activity_ids)))
    for model in (Note, Quote, Activity, Deal, Contact, Company, MergeAuditLog, DuplicateMatchingConfig):
        db.execute(delete(model).where(model.tenant_id == tenant_id))
    db.commit()


def seed_tenant(db, tenant_id: str) -> tuple[list[Company], list[Contact]]:
    companies = [Company(tenant_id=tenant_id, name=name, website=website) for name, website in DEMO_COMPANIES]
    db.add_all(companies)
    db.flush()

    contacts = [
        Contact(
            tenant_id=tenant_id,
            first_name=first,
            last_name=last,
            email=email,
            company_id=companies[company_index].id,
        )
        for first, last, email, company_index in DEMO_CONTACTS
    ]
    db.add_all(contacts)
    db.flush()

    deal = Deal(tenant_id=tenant_id, title="Acme renewal", stage="proposal", company_id=companies[1].id)
    call = Activity(tenant_id=tenant_id, subject="Renewal call", activity_type="call")
    db.add_all([deal, call])
    db.flush()

    # Both Smith records are on the same deal and call, so a merge has conflicts to resolve.
    db.add_all(
        [
            DealContact(deal_id=deal.id, contact_id=contacts[0].id),
            DealContact(deal_id=deal.id, contact_id=contacts[1].id),
            ActivityLink(activity_id=call.id, entity_type="Contact", entity_id=contacts[0].id),
            ActivityLink(activity_id=call.id, entity_type="Contact", entity_id=contacts[1].id),
            Quote(tenant_id=tenant_id, title="Q-1001", contact_id=contacts[1].id, company_id=companies[1].id),
            Note(tenant_id=tenant_id, entity_type="Company", entity_id=companies[1].id, body="Prefers email."),
        ]
    )
    db.commit()
    return companies, contacts


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed a demo tenant with near-duplicate CRM records.")
    parser.add_argument(
        "--tenant-id",
        default=DEFAULT_TENANT_ID,
        help=f"Tenant ID to seed (default: {DEFAULT_TENANT_ID})",
    )
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete existing records for the tenant before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    tenant_id: str = args.tenant_id

    with SessionLocal() as db:
        if not args.no_reset:
            reset_tenant(db, tenant_id)

        companies, contacts = seed_tenant(db, tenant_id)
        company_pairs = scan_all_duplicates(db, EntityKind.COMPANY, tenant_id=tenant_id, threshold=70)
        contact_pairs = scan_all_duplicates(db, EntityKind.CONTACT, tenant_id=tenant_id, threshold=70)

    print("Seed complete")
    print(f"tenant_id={tenant_id}")
    print(f"companies_created={len(companies)}")
    print(f"contacts_created={len(contacts)}")
    print(f"company_duplicate_pairs={company_pairs.total_count}")
    print(f"contact_duplicate_pairs={contact_pairs.total_count}")
    print()
    print("Inspect (send X-Tenant-Id and X-User-Id headers):")
    print("  GET /duplicates/scan/company")
    print("  GET /duplicates/scan/contact")
    print("  GET /duplicates/merge-preview/company?survivor_id=<id>&loser_id=<id>")


if __name__ == "__main__":
    main()
