"""Duplicate detector tests: single-record suggestions and batch scans."""

from __future__ import annotations

import unittest
from unittest import mock

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from crm_dedupe.config import Settings
from crm_dedupe.duplicates.errors import ScanLimitExceededError
from crm_dedupe.duplicates.kinds import EntityKind
from crm_dedupe.models.base import Base
from crm_dedupe.models.company import Company
from crm_dedupe.models.contact import Contact
from crm_dedupe.models.duplicate_matching_config import DuplicateMatchingConfig
from crm_dedupe.schemas.duplicate_settings import DuplicateSettingsUpdate
from crm_dedupe.services.detection import (
    check_duplicates,
    find_duplicates_for,
    scan_all_duplicates,
    scan_duplicates,
)
from crm_dedupe.services.duplicate_settings import update_matching_config
from crm_dedupe.tenancy import CallerContext

TENANT = "tenant-detection"
CALLER = CallerContext(tenant_id=TENANT, user_id="user-1")


class DuplicateDetectionTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        for table in reversed(Base.metadata.sorted_tables):
            self.db.execute(table.delete())
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()

    def _contact(self, first: str, last: str, email: str | None, *, tenant_id: str = TENANT) -> Contact:
        contact = Contact(tenant_id=tenant_id, first_name=first, last_name=last, email=email)
        self.db.add(contact)
        self.db.commit()
        return contact

    def _company(self, name: str, website: str | None) -> Company:
        company = Company(tenant_id=TENANT, name=name, website=website)
        self.db.add(company)
        self.db.commit()
        return company

    def test_ranked_matches_for_one_contact(self) -> None:
        exact = self._contact("John", "Smith", "john@acme.com")
        close = self._contact("Jon", "Smith", "john@acme.com")
        self._contact("Jane", "Doe", "jane@doe.org")
        self._contact("John", "Smith", "john@acme.com", tenant_id="other-tenant")

        matches = find_duplicates_for(
            self.db,
            EntityKind.CONTACT,
            {"name": "John Smith", "email": "john@acme.com"},
            tenant_id=TENANT,
            threshold=70,
        )

        self.assertEqual([match.candidate_id for match in matches], [exact.id, close.id])
        self.assertEqual(matches[0].score, 100)
        self.assertEqual(matches[0].display_name, "John Smith")
        self.assertEqual(matches[0].display_secondary, "john@acme.com")
        self.assertGreaterEqual(matches[1].score, 70)
        self.assertLess(matches[1].score, 100)

    def test_source_record_can_be_excluded(self) -> None:
        source = self._contact("John", "Smith", "john@acme.com")
        matches = find_duplicates_for(
            self.db,
            EntityKind.CONTACT,
            source.match_attributes(),
            tenant_id=TENANT,
            threshold=70,
            exclude_id=source.id,
        )
        self.assertEqual(matches, [])

    def test_results_are_capped_at_ten(self) -> None:
        for _ in range(12):
            self._contact("Pat", "Lee", "pat@lee.io")
        matches = find_duplicates_for(
            self.db,
            EntityKind.CONTACT,
            {"name": "Pat Lee", "email": "pat@lee.io"},
            tenant_id=TENANT,
            threshold=70,
        )
        self.assertEqual(len(matches), 10)

    def test_raising_the_threshold_never_adds_matches(self) -> None:
        self._contact("John", "Smith", "john@acme.com")
        self._contact("Jon", "Smith", "john@acme.com")
        self._contact("Johnny", "Smithers", "johnny@acme.com")
        self._contact("J", "Smith", None)

        counts = [
            len(
                find_duplicates_for(
                    self.db,
                    EntityKind.CONTACT,
                    {"name": "John Smith", "email": "john@acme.com"},
                    tenant_id=TENANT,
                    threshold=threshold,
                )
            )
            for threshold in (50, 60, 70, 80, 90, 100)
        ]
        self.assertEqual(counts, sorted(counts, reverse=True))
        self.assertGreaterEqual(counts[0], 2)

    def test_empty_source_attributes_return_no_matches(self) -> None:
        self._contact("John", "Smith", "john@acme.com")
        matches = find_duplicates_for(
            self.db,
            EntityKind.CONTACT,
            {"name": None, "email": "   "},
            tenant_id=TENANT,
            threshold=70,
        )
        self.assertEqual(matches, [])

    def test_acme_example_is_reported_near_hundred(self) -> None:
        self._company("Acme Inc", "acme.com")
        matches = find_duplicates_for(
            self.db,
            EntityKind.COMPANY,
            {"name": "ACME, Inc.", "domain": "www.acme.com"},
            tenant_id=TENANT,
            threshold=70,
        )
        self.assertEqual(len(matches), 1)
        self.assertEqual(matches[0].score, 100)
        self.assertEqual(matches[0].display_secondary, "acme.com")

    def test_batch_scan_pairs_earlier_record_first(self) -> None:
        acme = self._company("Acme Inc", "acme.com")
        variant = self._company("ACME, Inc.", "www.acme.com")
        self._company("Globex Corporation", "globex.com")

        page = scan_all_duplicates(self.db, EntityKind.COMPANY, tenant_id=TENANT, threshold=70)

        self.assertEqual(page.total_count, 1)
        self.assertEqual(page.page, 1)
        pair = page.items[0]
        self.assertEqual(pair.score, 100)
        self.assertEqual(pair.match_a.candidate_id, acme.id)
        self.assertEqual(pair.match_b.candidate_id, variant.id)

    def test_batch_scan_sorts_and_paginates(self) -> None:
        for _ in range(3):
            self._company("Initech", "initech.com")
        self._company("Initech LLC", "initech.com")

        first = scan_all_duplicates(self.db, EntityKind.COMPANY, tenant_id=TENANT, threshold=70, page=1, page_size=4)
        second = scan_all_duplicates(self.db, EntityKind.COMPANY, tenant_id=TENANT, threshold=70, page=2, page_size=4)
        beyond = scan_all_duplicates(self.db, EntityKind.COMPANY, tenant_id=TENANT, threshold=70, page=9, page_size=4)

        self.assertEqual(first.total_count, 6)
        self.assertEqual(len(first.items), 4)
        self.assertEqual(len(second.items), 2)
        self.assertEqual(beyond.items, [])
        scores = [pair.score for pair in first.items + second.items]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual(scores[:3], [100, 100, 100])

    def test_batch_scan_rejects_bad_paging(self) -> None:
        with self.assertRaises(ValueError):
            scan_all_duplicates(self.db, EntityKind.COMPANY, tenant_id=TENANT, threshold=70, page=0)

    def test_batch_scan_refuses_tenants_above_the_ceiling(self) -> None:
        for index in range(3):
            self._company(f"Company {index}", None)

        with mock.patch(
            "crm_dedupe.services.detection.get_settings",
            return_value=Settings(scan_max_records=2),
        ):
            with self.assertRaises(ScanLimitExceededError) as raised:
                scan_all_duplicates(self.db, EntityKind.COMPANY, tenant_id=TENANT, threshold=70)

        self.assertEqual(raised.exception.record_count, 3)
        self.assertEqual(raised.exception.limit, 2)

    def test_merged_records_are_ignored(self) -> None:
        survivor = self._company("Acme Inc", "acme.com")
        loser = self._company("Acme Inc", "acme.com")
        loser.merged_into_id = survivor.id
        self.db.commit()

        matches = find_duplicates_for(
            self.db,
            EntityKind.COMPANY,
            {"name": "Acme Inc", "domain": "acme.com"},
            tenant_id=TENANT,
            threshold=70,
        )
        page = scan_all_duplicates(self.db, EntityKind.COMPANY, tenant_id=TENANT, threshold=70)

        self.assertEqual([match.candidate_id for match in matches], [survivor.id])
        self.assertEqual(page.total_count, 0)

    def test_check_respects_disabled_auto_detection(self) -> None:
        self._contact("John", "Smith", "john@acme.com")
        attributes = {"name": "John Smith", "email": "john@acme.com"}
        self.assertEqual(len(check_duplicates(self.db, EntityKind.CONTACT, attributes, caller=CALLER)), 1)

        update_matching_config(
            self.db,
            EntityKind.CONTACT,
            DuplicateSettingsUpdate(auto_detection_enabled=False),
            tenant_id=TENANT,
        )

        self.assertEqual(check_duplicates(self.db, EntityKind.CONTACT, attributes, caller=CALLER), [])

    def test_check_uses_configured_matching_fields_and_threshold(self) -> None:
        self._contact("Completely", "Different", "shared@acme.com")
        attributes = {"name": "John Smith", "email": "shared@acme.com"}
        self.assertEqual(check_duplicates(self.db, EntityKind.CONTACT, attributes, caller=CALLER), [])

        update_matching_config(
            self.db,
            EntityKind.CONTACT,
            DuplicateSettingsUpdate(matching_fields=["email"], similarity_threshold=95),
            tenant_id=TENANT,
        )

        matches = check_duplicates(self.db, EntityKind.CONTACT, attributes, caller=CALLER)
        self.assertEqual(len(matches), 1)
        self.assertEqual(matches[0].score, 100)

    def test_detection_never_writes_matching_settings(self) -> None:
        self._contact("John", "Smith", "john@acme.com")
        self._contact("Jon", "Smith", "john@acme.com")
        self._company("Acme Inc", "acme.com")

        matches = check_duplicates(
            self.db,
            EntityKind.CONTACT,
            {"name": "John Smith", "email": "john@acme.com"},
            caller=CALLER,
        )
        page = scan_duplicates(self.db, EntityKind.COMPANY, caller=CALLER)

        self.assertEqual(len(matches), 2)
        self.assertEqual(page.total_count, 0)
        self.assertEqual(self._config_rows(), 0)
        self.assertFalse(self.db.new)

    def _config_rows(self) -> int:
        return int(self.db.scalar(select(func.count()).select_from(DuplicateMatchingConfig)) or 0)

    def test_scan_uses_tenant_threshold(self) -> None:
        self._contact("John", "Smith", "john@acme.com")
        self._contact("Jon", "Smith", "john@acme.com")
        self.assertEqual(scan_duplicates(self.db, EntityKind.CONTACT, caller=CALLER).total_count, 1)

        update_matching_config(
            self.db,
            EntityKind.CONTACT,
            DuplicateSettingsUpdate(similarity_threshold=100),
            tenant_id=TENANT,
        )

        self.assertEqual(scan_duplicates(self.db, EntityKind.CONTACT, caller=CALLER).total_count, 0)


if __name__ == "__main__":
    unittest.main()
