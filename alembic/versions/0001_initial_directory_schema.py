"""initial directory schema (companies, claims, company users, admins, quotes)

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


# text[] on Postgres, JSON on SQLite
StringList = postgresql.ARRAY(sa.String()).with_variant(sa.JSON(), "sqlite")


def _insp():
    return sa.inspect(op.get_bind())


def _has_table(name: str) -> bool:
    return name in _insp().get_table_names()


def _now():
    return sa.text("CURRENT_TIMESTAMP")


def upgrade():
    if not _has_table("companies"):
        op.create_table(
            "companies",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("slug", sa.String(255), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("logo_url", sa.String, nullable=True),
            sa.Column("description", sa.Text, nullable=False, server_default=""),
            sa.Column("description_sv", sa.Text, nullable=True),
            sa.Column("categories", StringList, nullable=False),
            sa.Column("services", StringList, nullable=True),
            sa.Column("serviceomraden", StringList, nullable=True),
            sa.Column("specialties", sa.Text, nullable=True),
            sa.Column("location", sa.String, nullable=False, server_default=""),
            sa.Column("address", sa.String, nullable=True),
            sa.Column("postal_code", sa.String(20), nullable=True),
            sa.Column("city", sa.String(120), nullable=True),
            sa.Column("region", sa.String(120), nullable=False),
            sa.Column("contact_email", sa.String(255), nullable=True),
            sa.Column("phone", sa.String(60), nullable=True),
            sa.Column("website", sa.String, nullable=True),
            sa.Column("is_featured", sa.Boolean, nullable=False, server_default=sa.false()),
            sa.Column("is_verified", sa.Boolean, nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.DateTime, nullable=False, server_default=_now()),
        )
        op.create_index("ix_companies_slug", "companies", ["slug"], unique=True)
        op.create_index("ix_companies_name", "companies", ["name"])
        op.create_index("ix_companies_city", "companies", ["city"])
        op.create_index("ix_companies_region", "companies", ["region"])
        op.create_index("ix_companies_created_at", "companies", ["created_at"])

    if not _has_table("admin_users"):
        op.create_table(
            "admin_users",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("username", sa.String(120), nullable=False),
            sa.Column("hashed_password", sa.String, nullable=False),
            sa.Column("role", sa.String(30), nullable=False, server_default="admin"),
            sa.Column("is_super_admin", sa.Boolean, nullable=False, server_default=sa.false()),
            sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.DateTime, nullable=False, server_default=_now()),
            sa.Column("last_login_at", sa.DateTime, nullable=True),
        )
        op.create_index("ix_admin_users_username", "admin_users", ["username"], unique=True)

    if not _has_table("claim_requests"):
        op.create_table(
            "claim_requests",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("company_id", sa.String(36), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(255), nullable=False),
            sa.Column("phone", sa.String(60), nullable=True),
            sa.Column("message", sa.Text, nullable=False, server_default=""),
            sa.Column("consent", sa.Boolean, nullable=False, server_default=sa.false()),
            sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
            sa.Column("submitted_at", sa.DateTime, nullable=False, server_default=_now()),
            sa.Column("reviewed_at", sa.DateTime, nullable=True),
            sa.Column("reviewed_by", sa.String(255), nullable=True),
            sa.Column("review_notes", sa.Text, nullable=True),
            sa.CheckConstraint(
                "status IN ('pending', 'approved', 'rejected')",
                name="ck_claim_requests_status",
            ),
            sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        )
        op.create_index("ix_claim_requests_company_id", "claim_requests", ["company_id"])
        op.create_index("ix_claim_requests_email", "claim_requests", ["email"])
        op.create_index("ix_claim_requests_status", "claim_requests", ["status"])
        op.create_index(
            "ix_claim_requests_status_submitted",
            "claim_requests",
            ["status", sa.text("submitted_at DESC")],
        )

    if not _has_table("company_users"):
        op.create_table(
            "company_users",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("company_id", sa.String(36), nullable=False),
            sa.Column("email", sa.String(255), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("role", sa.String(30), nullable=False, server_default="owner"),
            sa.Column("access_token_hash", sa.String(64), nullable=False),
            sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
            sa.Column("approved_by", sa.String(255), nullable=True),
            sa.Column("claim_request_id", sa.String(36), nullable=True),
            sa.Column("created_at", sa.DateTime, nullable=False, server_default=_now()),
            sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["claim_request_id"], ["claim_requests.id"]),
        )
        op.create_index("ix_company_users_company_id", "company_users", ["company_id"])
        op.create_index("ix_company_users_email", "company_users", ["email"], unique=True)
        op.create_index(
            "ix_company_users_access_token_hash",
            "company_users",
            ["access_token_hash"],
            unique=True,
        )

    if not _has_table("quote_requests"):
        op.create_table(
            "quote_requests",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("company_id", sa.String(36), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(255), nullable=False),
            sa.Column("phone", sa.String(60), nullable=True),
            sa.Column("company", sa.String(255), nullable=True),
            sa.Column("service_type", sa.String(255), nullable=True),
            sa.Column("message", sa.Text, nullable=False),
            sa.Column("urgency", sa.String(20), nullable=True),
            sa.Column("preferred_contact", sa.String(10), nullable=False, server_default="email"),
            sa.Column("submitted_at", sa.DateTime, nullable=False, server_default=_now()),
            sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        )
        op.create_index("ix_quote_requests_company_id", "quote_requests", ["company_id"])
        op.create_index("ix_quote_requests_submitted_at", "quote_requests", ["submitted_at"])

    if not _has_table("general_quote_requests"):
        op.create_table(
            "general_quote_requests",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("description", sa.Text, nullable=False),
            sa.Column("service_type", sa.String(255), nullable=False),
            sa.Column("urgency", sa.String(20), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(255), nullable=False),
            sa.Column("phone", sa.String(60), nullable=True),
            sa.Column("company_name", sa.String(255), nullable=True),
            sa.Column("preferred_contact", sa.String(10), nullable=False, server_default="email"),
            sa.Column("files", sa.JSON, nullable=True),
            sa.Column("submitted_at", sa.DateTime, nullable=False, server_default=_now()),
        )
        op.create_index(
            "ix_general_quote_requests_submitted_at",
            "general_quote_requests",
            ["submitted_at"],
        )


def downgrade():
    for table in (
        "general_quote_requests",
        "quote_requests",
        "company_users",
        "claim_requests",
        "admin_users",
        "companies",
    ):
        if _has_table(table):
            op.drop_table(table)
