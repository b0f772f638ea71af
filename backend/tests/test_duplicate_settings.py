"""Per-tenant duplicate matching settings tests."""

from __future__ import annotations

import unittest

from pydantic import ValidationError
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from crm_dedupe.duplicates.kinds import EntityKind
from crm_dedupe.models.base import Base
from crm_dedupe.models.duplicate_matching_config import DuplicateMatchingConfig
from crm_dedupe.schemas.duplicate_settings import DuplicateSettingsUpdate
from crm_dedupe.services.duplicate_settings import (
    get_matching_config,
    list_matching_configs,
    update_matching_config,
)


class DuplicateSettingsTests(unittest.TestCase):
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

    def test_defaults_are_created_once_on_first_read(self) -> None:
        first = get_matching_config(self.db, EntityKind.COMPANY, tenant_id="t1")
        second = get_matching_config(self.db, EntityKind.COMPANY, tenant_id="t1")

        self.assertEqual(first.id, second.id)
        self.assertTrue(first.auto_detection_enabled)
        self.assertEqual(first.similarity_threshold, 70)
        self.assertEqual(first.matching_fields, ["name", "domain"])
        self.assertEqual(self.db.scalar(select(func.count()).select_from(DuplicateMatchingConfig)), 1)

    def test_list_covers_every_kind_per_tenant(self) -> None:
        configs = list_matching_configs(self.db, tenant_id="t1")
        self.assertEqual([config.entity_kind for config in configs], ["contact", "company"])
        list_matching_configs(self.db, tenant_id="t2")
        self.assertEqual(self.db.scalar(select(func.count()).select_from(DuplicateMatchingConfig)), 4)

    def test_partial_update_keeps_other_values(self) -> None:
        updated = update_matching_config(
            self.db,
            EntityKind.CONTACT,
            DuplicateSettingsUpdate(similarity_threshold=85),
            tenant_id="t1",
        )
        self.assertEqual(updated.similarity_threshold, 85)
        self.assertTrue(updated.auto_detection_enabled)
        self.assertEqual(updated.matching_fields, ["name", "email"])

        other_tenant = get_matching_config(self.db, EntityKind.CONTACT, tenant_id="t2")
        self.assertEqual(other_tenant.similarity_threshold, 70)

    def test_matching_fields_are_validated(self) -> None:
        with self.assertRaises(ValueError):
            update_matching_config(
                self.db,
                EntityKind.COMPANY,
                DuplicateSettingsUpdate(matching_fields=["email"]),
                tenant_id="t1",
            )
        with self.assertRaises(ValueError):
            update_matching_config(
                self.db,
                EntityKind.COMPANY,
                DuplicateSettingsUpdate(matching_fields=[]),
                tenant_id="t1",
            )
        updated = update_matching_config(
            self.db,
            EntityKind.COMPANY,
            DuplicateSettingsUpdate(matching_fields=[" Domain ", "domain"]),
            tenant_id="t1",
        )
        self.assertEqual(updated.matching_fields, ["domain"])

    def test_threshold_range_is_enforced_by_the_schema(self) -> None:
        with self.assertRaises(ValidationError):
            DuplicateSettingsUpdate(similarity_threshold=49)
        with self.assertRaises(ValidationError):
            DuplicateSettingsUpdate(similarity_threshold=101)


if __name__ == "__main__":
    unittest.main()
