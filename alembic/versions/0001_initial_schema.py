"""Initial schema: events and applications

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _document_columns() -> list[sa.Column]:
    return [
        sa.Column("date", sa.String(length=64), nullable=True),
        sa.Column("date_number", sa.Float(), nullable=True),
        sa.Column("document", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("hr_email", sa.String(length=255), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=True),
        *_document_columns(),
    )
    op.create_index("ix_events_hr_email", "events", ["hr_email"])
    op.create_index("ix_events_date", "events", ["date"])

    op.create_table(
        "application",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("job_id", sa.String(length=64), nullable=False),
        sa.Column("applicant_email", sa.String(length=255), nullable=False),
        *_document_columns(),
        sa.UniqueConstraint("job_id", "applicant_email", name="uq_application_job_applicant"),
    )
    op.create_index("ix_application_job_id", "application", ["job_id"])
    op.create_index("ix_application_applicant_email", "application", ["applicant_email"])


def downgrade() -> None:
    op.drop_index("ix_application_applicant_email", table_name="application")
    op.drop_index("ix_application_job_id", table_name="application")
    op.drop_table("application")
    op.drop_index("ix_events_date", table_name="events")
    op.drop_index("ix_events_hr_email", table_name="events")
    op.drop_table("events")
