"""Initial schema - create all MedExplain tables.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-11-10

This migration creates the complete MedExplain schema:
- sources, drugs, genes, variants, phenotypes: reference data
- guidelines, citations, interactions: drug-gene guidance
- app_admins: administrator membership
- saved_answers, usage_monthly: per-user data
- ingestion_jobs, audit_logs: admin bookkeeping

It also creates:
- All indexes for query performance
- All constraints for data integrity, including the one-row-per-user-month
  unique constraint the usage upsert relies on
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """Create all tables, indexes, and constraints."""

    # ==========================================================================
    # Reference data
    # ==========================================================================

    # --------------------------------------------------------------------------
    # sources table
    # --------------------------------------------------------------------------
    op.create_table(
        "sources",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("name", sa.Text(), nullable=False, comment="Source display name"),
        sa.Column("url", sa.Text(), nullable=True, comment="Reference URL"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
            comment="Whether the source is currently used for ingestion",
        ),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id", name="pk_sources"),
    )

    # --------------------------------------------------------------------------
    # drugs table
    # --------------------------------------------------------------------------
    op.create_table(
        "drugs",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("name", sa.Text(), nullable=False, comment="Canonical drug name"),
        sa.Column(
            "aliases",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
            comment="Alternative names",
        ),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id", name="pk_drugs"),
    )
    op.create_index("ix_drugs_name", "drugs", ["name"], unique=False)

    # --------------------------------------------------------------------------
    # genes table
    # --------------------------------------------------------------------------
    op.create_table(
        "genes",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("symbol", sa.Text(), nullable=False, comment="HGNC gene symbol"),
        sa.Column("name", sa.Text(), nullable=True, comment="Full gene name"),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id", name="pk_genes"),
    )
    op.create_index("ix_genes_symbol", "genes", ["symbol"], unique=False)

    # --------------------------------------------------------------------------
    # variants table
    # --------------------------------------------------------------------------
    op.create_table(
        "variants",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("gene_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("rsid", sa.Text(), nullable=True, comment="dbSNP rs id"),
        sa.Column("allele", sa.Text(), nullable=True),
        sa.Column("function", sa.Text(), nullable=True, comment="Functional annotation"),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(
            ["gene_id"],
            ["genes.id"],
            name="fk_variants_gene_id_genes",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_variants"),
    )
    op.create_index("ix_variants_gene_id", "variants", ["gene_id"], unique=False)

    # --------------------------------------------------------------------------
    # phenotypes table
    # --------------------------------------------------------------------------
    op.create_table(
        "phenotypes",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("gene_id", sa.UUID(), nullable=False),
        sa.Column(
            "phenotype",
            sa.Text(),
            nullable=False,
            comment="Metabolizer status or other phenotype",
        ),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(
            ["gene_id"],
            ["genes.id"],
            name="fk_phenotypes_gene_id_genes",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_phenotypes"),
    )
    op.create_index("ix_phenotypes_gene_id", "phenotypes", ["gene_id"], unique=False)

    # --------------------------------------------------------------------------
    # guidelines table
    # --------------------------------------------------------------------------
    op.create_table(
        "guidelines",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("drug_id", sa.UUID(), nullable=False),
        sa.Column("gene_id", sa.UUID(), nullable=False),
        sa.Column("source_id", sa.UUID(), nullable=True),
        sa.Column("recommendation", sa.Text(), nullable=True),
        sa.Column(
            "evidence_level",
            sa.Text(),
            nullable=True,
            comment="High / Moderate / Low",
        ),
        sa.Column("patient_summary", sa.Text(), nullable=True),
        sa.Column("clinician_summary", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(
            ["drug_id"],
            ["drugs.id"],
            name="fk_guidelines_drug_id_drugs",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["gene_id"],
            ["genes.id"],
            name="fk_guidelines_gene_id_genes",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["source_id"],
            ["sources.id"],
            name="fk_guidelines_source_id_sources",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_guidelines"),
    )
    op.create_index(
        "ix_guidelines_drug_gene", "guidelines", ["drug_id", "gene_id"], unique=False
    )

    # --------------------------------------------------------------------------
    # citations table
    # --------------------------------------------------------------------------
    op.create_table(
        "citations",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("guideline_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("authors", sa.Text(), nullable=True),
        sa.Column("journal", sa.Text(), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("doi", sa.Text(), nullable=True),
        sa.Column("pmid", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["guideline_id"],
            ["guidelines.id"],
            name="fk_citations_guideline_id_guidelines",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_citations"),
    )
    op.create_index(
        "ix_citations_guideline_id", "citations", ["guideline_id"], unique=False
    )

    # --------------------------------------------------------------------------
    # interactions table
    # --------------------------------------------------------------------------
    op.create_table(
        "interactions",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("drug_id", sa.UUID(), nullable=False),
        sa.Column("gene_id", sa.UUID(), nullable=False),
        sa.Column("phenotype_id", sa.UUID(), nullable=True),
        sa.Column("guideline_id", sa.UUID(), nullable=True),
        sa.Column("action", sa.Text(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("evidence", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(
            ["drug_id"],
            ["drugs.id"],
            name="fk_interactions_drug_id_drugs",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["gene_id"],
            ["genes.id"],
            name="fk_interactions_gene_id_genes",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["phenotype_id"],
            ["phenotypes.id"],
            name="fk_interactions_phenotype_id_phenotypes",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["guideline_id"],
            ["guidelines.id"],
            name="fk_interactions_guideline_id_guidelines",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_interactions"),
    )
    op.create_index(
        "ix_interactions_drug_gene", "interactions", ["drug_id", "gene_id"], unique=False
    )

    # ==========================================================================
    # Users and admin
    # ==========================================================================

    # --------------------------------------------------------------------------
    # app_admins table
    # --------------------------------------------------------------------------
    op.create_table(
        "app_admins",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("user_id", sa.UUID(), nullable=False, comment="Auth provider user id"),
        sa.Column("email", sa.Text(), nullable=False, comment="Admin email address"),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_app_admins"),
        sa.UniqueConstraint("user_id", name="uq_app_admins_user_id"),
    )
    op.create_index("ix_app_admins_user_id", "app_admins", ["user_id"], unique=False)

    # --------------------------------------------------------------------------
    # saved_answers table
    # --------------------------------------------------------------------------
    op.create_table(
        "saved_answers",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("user_id", sa.UUID(), nullable=False, comment="Owning user id"),
        sa.Column("drug_name", sa.Text(), nullable=False),
        sa.Column("gene_name", sa.Text(), nullable=False),
        sa.Column("user_type", sa.Text(), nullable=False, comment="Patient / Clinician"),
        sa.Column("answer", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_saved_answers"),
    )
    op.create_index(
        "ix_saved_answers_user_id", "saved_answers", ["user_id"], unique=False
    )

    # --------------------------------------------------------------------------
    # usage_monthly table
    # --------------------------------------------------------------------------
    op.create_table(
        "usage_monthly",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("user_id", sa.UUID(), nullable=False, comment="Owning user id"),
        sa.Column(
            "month",
            sa.String(length=7),
            nullable=False,
            comment="Calendar month YYYY-MM (UTC)",
        ),
        sa.Column("query_count", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint(
            "query_count >= 0", name="ck_usage_monthly_query_count_non_negative"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_usage_monthly"),
        sa.UniqueConstraint("user_id", "month", name="uq_usage_monthly_user_month"),
    )

    # --------------------------------------------------------------------------
    # ingestion_jobs table
    # --------------------------------------------------------------------------
    op.create_table(
        "ingestion_jobs",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("job_type", sa.Text(), nullable=False, comment="Pipeline name"),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            comment="Current job state",
        ),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "records_processed", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("error_message", sa.Text(), nullable=True),
        _created_at(),
        sa.CheckConstraint(
            "records_processed >= 0",
            name="ck_ingestion_jobs_records_processed_non_negative",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_ingestion_jobs"),
    )
    op.create_index(
        "ix_ingestion_jobs_created_at", "ingestion_jobs", ["created_at"], unique=False
    )

    # --------------------------------------------------------------------------
    # audit_logs table
    # --------------------------------------------------------------------------
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.UUID(), nullable=False, comment="UUID7 primary key"),
        sa.Column("user_id", sa.UUID(), nullable=True, comment="Acting user (NULL = system)"),
        sa.Column("action", sa.Text(), nullable=False, comment="Action performed"),
        sa.Column(
            "table_name", sa.Text(), nullable=True, comment="Name of the affected table"
        ),
        sa.Column(
            "record_id", sa.UUID(), nullable=True, comment="UUID of the affected record"
        ),
        sa.Column("old_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("new_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_audit_logs"),
    )
    op.create_index(
        "ix_audit_logs_created_at", "audit_logs", ["created_at"], unique=False
    )
    op.create_index(
        "ix_audit_logs_table_record",
        "audit_logs",
        ["table_name", "record_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop all tables in reverse order."""

    # Drop tables in reverse dependency order
    op.drop_table("audit_logs")
    op.drop_table("ingestion_jobs")
    op.drop_table("usage_monthly")
    op.drop_table("saved_answers")
    op.drop_table("app_admins")
    op.drop_table("interactions")
    op.drop_table("citations")
    op.drop_table("guidelines")
    op.drop_table("phenotypes")
    op.drop_table("variants")
    op.drop_table("genes")
    op.drop_table("drugs")
    op.drop_table("sources")
