"""create patients table

Revision ID: 0001_create_patients
Revises:
Create Date: 2026-10-18

"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_create_patients"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "patients",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("mrn", sa.String(length=64), nullable=False),
        sa.Column("surgery_type", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("ot_date", sa.Date(), nullable=False),
        sa.Column("surgeon", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("unit", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_patients")),
    )
    # MRN is looked up but intentionally not unique.
    op.create_index(op.f("ix_patients_mrn"), "patients", ["mrn"], unique=False)
    op.create_index(op.f("ix_patients_created_at"), "patients", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_patients_created_at"), table_name="patients")
    op.drop_index(op.f("ix_patients_mrn"), table_name="patients")
    op.drop_table("patients")
