# This project was developed with assistance from AI tools.
"""create credit workflow schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:41.503118

"""

import sqlalchemy as sa
from alembic import op

revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "loan_applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_reference_number", sa.String(50), nullable=False),
        sa.Column("customer_number", sa.String(50), nullable=False),
        sa.Column("tin_number", sa.String(50), nullable=True),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("annual_revenue", sa.Numeric(16, 2), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("middle_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("mothers_name", sa.String(100), nullable=True),
        sa.Column("gender", sa.String(6), nullable=True),
        sa.Column("marital_status", sa.String(8), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("national_id", sa.String(50), nullable=True),
        sa.Column("phone", sa.String(30), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("region", sa.String(100), nullable=True),
        sa.Column("zone", sa.String(100), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("subcity", sa.String(100), nullable=True),
        sa.Column("woreda", sa.String(100), nullable=True),
        sa.Column("monthly_income", sa.Numeric(16, 2), nullable=True),
        sa.Column("customer_status", sa.String(50), nullable=True),
        sa.Column("account_type", sa.String(50), nullable=True),
        sa.Column("major_line_business", sa.String(255), nullable=False),
        sa.Column("date_of_establishment_mlb", sa.Date(), nullable=False),
        sa.Column("other_line_business", sa.String(255), nullable=True),
        sa.Column("date_of_establishment_olb", sa.Date(), nullable=True),
        sa.Column("purpose_of_loan", sa.Text(), nullable=True),
        sa.Column("loan_type", sa.String(100), nullable=False),
        sa.Column("loan_amount", sa.Numeric(16, 2), nullable=False),
        sa.Column("loan_period", sa.Integer(), nullable=False),
        sa.Column("mode_of_repayment", sa.String(100), nullable=True),
        sa.Column("economic_sector", sa.String(100), nullable=True),
        sa.Column("customer_segmentation", sa.String(100), nullable=True),
        sa.Column("credit_initiation_center", sa.String(255), nullable=True),
        sa.Column(
            "application_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("last_document_received_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "application_status", sa.String(30), nullable=False, server_default="PENDING",
        ),
        sa.Column("relation_manager_id", sa.String(255), nullable=False),
        sa.Column("credit_analyst_id", sa.String(255), nullable=True),
        sa.Column("supervisor_id", sa.String(255), nullable=True),
        sa.Column("credit_analyst_comment", sa.Text(), nullable=True),
        sa.Column("rm_recommendation", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("application_reference_number"),
        sa.UniqueConstraint("customer_number"),
    )
    op.create_index(
        "ix_loan_applications_application_reference_number",
        "loan_applications",
        ["application_reference_number"],
    )
    op.create_index("ix_loan_applications_customer_number", "loan_applications", ["customer_number"])
    op.create_index("ix_loan_applications_tin_number", "loan_applications", ["tin_number"])
    op.create_index(
        "ix_loan_applications_application_status", "loan_applications", ["application_status"],
    )
    op.create_index(
        "ix_loan_applications_relation_manager_id", "loan_applications", ["relation_manager_id"],
    )
    op.create_index(
        "ix_loan_applications_credit_analyst_id", "loan_applications", ["credit_analyst_id"],
    )
    op.create_index("ix_loan_applications_supervisor_id", "loan_applications", ["supervisor_id"])

    op.create_table(
        "shareholders",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("share_value", sa.Numeric(16, 2), nullable=False),
        sa.Column("share_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("nationality", sa.String(100), nullable=True),
        sa.Column("id_number", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_director", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("position", sa.String(100), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["application_id"], ["loan_applications.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_shareholders_application_id", "shareholders", ["application_id"])

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("doc_type", sa.String(20), nullable=False),
        sa.Column("object_key", sa.String(500), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=True),
        sa.Column("content_type", sa.String(100), nullable=True),
        sa.Column("uploaded_by", sa.String(255), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
        ),
        sa.ForeignKeyConstraint(["application_id"], ["loan_applications.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_documents_application_id", "documents", ["application_id"])

    op.create_table(
        "loan_analyses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_reference_number", sa.String(50), nullable=False),
        sa.Column("analyst_conclusion", sa.Text(), nullable=True),
        sa.Column("analyst_recommendation", sa.Text(), nullable=True),
        sa.Column("rm_recommendation", sa.Text(), nullable=True),
        sa.Column("analyzed_by", sa.String(255), nullable=True),
        sa.Column("pestel_score", sa.Integer(), nullable=True),
        sa.Column("swot_score", sa.Integer(), nullable=True),
        sa.Column("risk_score", sa.Integer(), nullable=True),
        sa.Column("esg_score", sa.Integer(), nullable=True),
        sa.Column("financial_need_score", sa.Integer(), nullable=True),
        sa.Column("overall_score", sa.Integer(), nullable=True),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.String(255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["application_reference_number"],
            ["loan_applications.application_reference_number"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("application_reference_number"),
    )
    op.create_index(
        "ix_loan_analyses_application_reference_number",
        "loan_analyses",
        ["application_reference_number"],
    )

    op.create_table(
        "decisions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_reference_number", sa.String(50), nullable=False),
        sa.Column("decision", sa.String(17), nullable=False),
        sa.Column("decision_reason", sa.Text(), nullable=False),
        sa.Column("responsible_unit_name", sa.String(255), nullable=False),
        sa.Column("responsible_unit_email", sa.String(255), nullable=True),
        sa.Column("responsible_unit_phone", sa.String(30), nullable=True),
        sa.Column("decided_by", sa.String(255), nullable=True),
        sa.Column(
            "decision_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["application_reference_number"],
            ["loan_applications.application_reference_number"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("application_reference_number"),
    )
    op.create_index(
        "ix_decisions_application_reference_number", "decisions", ["application_reference_number"],
    )

    op.create_table(
        "member_decisions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_reference_number", sa.String(50), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("member_name", sa.String(255), nullable=True),
        sa.Column("member_email", sa.String(255), nullable=True),
        sa.Column("decision", sa.String(17), nullable=False),
        sa.Column("decision_reason", sa.Text(), nullable=False),
        sa.Column(
            "decision_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["application_reference_number"],
            ["loan_applications.application_reference_number"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "application_reference_number", "user_id", name="uq_member_decision_ref_user",
        ),
    )
    op.create_index(
        "ix_member_decisions_application_reference_number",
        "member_decisions",
        ["application_reference_number"],
    )
    op.create_index("ix_member_decisions_user_id", "member_decisions", ["user_id"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "timestamp", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
        ),
        sa.Column("prev_hash", sa.String(64), nullable=True),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("user_role", sa.String(50), nullable=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=True),
        sa.Column("event_data", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_events_event_type", "audit_events", ["event_type"])
    op.create_index("ix_audit_events_application_id", "audit_events", ["application_id"])


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_table("member_decisions")
    op.drop_table("decisions")
    op.drop_table("loan_analyses")
    op.drop_table("documents")
    op.drop_table("shareholders")
    op.drop_table("loan_applications")
