"""merge state, merge audit log, matching config and trigram indexes

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:02
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0002"
down_revision: str | None = "20261019_0001"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

_MERGEABLE_TABLES = ("contacts", "companies")


def upgrade() -> None:
    for table_name in _MERGEABLE_TABLES:
        op.add_column(table_name, sa.Column("merged_into_id", sa.Integer(), nullable=True))
        op.add_column(table_name, sa.Column("merged_at", sa.DateTime(timezone=True), nullable=True))
        op.add_column(table_name, sa.Column("merged_by_user_id", sa.String(length=64), nullable=True))
        op.create_index(f"ix_{table_name}_merged_into_id", table_name, ["merged_into_id"], unique=False)

    op.create_table(
        "merge_audit_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tenant_id", sa.String(length=64), nullable=False),
        sa.Column("entity_kind", sa.String(length=32), nullable=False),
        sa.Column("survivor_id", sa.Integer(), nullable=False),
        sa.Column("loser_id", sa.Integer(), nullable=False),
        sa.Column("performed_by", sa.String(length=64), nullable=False),
        sa.Column("field_selections", sa.JSON(), nullable=False),
        sa.Column("transfer_counts", sa.JSON(), nullable=False),
        sa.Column("performed_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_merge_audit_logs_tenant_id", "merge_audit_logs", ["tenant_id"], unique=False)
    op.create_index("ix_merge_audit_logs_survivor_id", "merge_audit_logs", ["survivor_id"], unique=False)
    op.create_index("ix_merge_audit_logs_loser_id", "merge_audit_logs", ["loser_id"], unique=False)
    op.create_index(
        "ix_merge_audit_logs_tenant_kind",
        "merge_audit_logs",
        ["tenant_id", "entity_kind"],
        unique=False,
    )

    op.create_table(
        "duplicate_matching_configs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tenant_id", sa.String(length=64), nullable=False),
        sa.Column("entity_kind", sa.String(length=32), nullable=False),
        sa.Column("auto_detection_enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("similarity_threshold", sa.Integer(), server_default=sa.text("70"), nullable=False),
        sa.Column("matching_fields", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "entity_kind", name="uq_duplicate_matching_configs_tenant_kind"),
    )
    op.create_index(
        "ix_duplicate_matching_configs_tenant_id",
        "duplicate_matching_configs",
        ["tenant_id"],
        unique=False,
    )

    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_contacts_full_name_trgm ON contacts "
        "USING gin ((trim(coalesce(first_name, '') || ' ' || coalesce(last_name, ''))) gin_trgm_ops)"
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_contacts_email_trgm ON contacts USING gin (email gin_trgm_ops)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_companies_name_trgm ON companies USING gin (name gin_trgm_ops)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_companies_website_trgm ON companies USING gin (website gin_trgm_ops)")


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS ix_companies_website_trgm")
    op.execute("DROP INDEX IF EXISTS ix_companies_name_trgm")
    op.execute("DROP INDEX IF EXISTS ix_contacts_email_trgm")
    op.execute("DROP INDEX IF EXISTS ix_contacts_full_name_trgm")

    op.drop_index("ix_duplicate_matching_configs_tenant_id", table_name="duplicate_matching_configs")
    op.drop_table("duplicate_matching_configs")

    op.drop_index("ix_merge_audit_logs_tenant_kind", table_name="merge_audit_logs")
    op.drop_index("ix_merge_audit_logs_loser_id", table_name="merge_audit_logs")
    op.drop_index("ix_merge_audit_logs_survivor_id", table_name="merge_audit_logs")
    op.drop_index("ix_merge_audit_logs_tenant_id", table_name="merge_audit_logs")
    op.drop_table("merge_audit_logs")

    for table_name in reversed(_MERGEABLE_TABLES):
        op.drop_index(f"ix_{table_name}_merged_into_id", table_name=table_name)
        op.drop_column(table_name, "merged_by_user_id")
        op.drop_column(table_name, "merged_at")
        op.drop_column(table_name, "merged_into_id")
