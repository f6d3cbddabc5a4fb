"""Initial schema: hospitals, patients, exclusion lists; seed hospitals.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SEED_HOSPITALS = ["Atascadero", "Coalinga", "Metropolitan", "Napa", "Patton"]


def upgrade() -> None:
    hospitals = op.create_table(
        "hospitals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(64), nullable=False, unique=True),
    )
    op.create_index("ix_hospitals_id", "hospitals", ["id"])
    # Name lookups from the API are case-insensitive
    op.create_index("ix_hospitals_name_lower", "hospitals", [sa.text("lower(name)")], unique=True)

    op.create_table(
        "patients",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("hospital_id", sa.Integer(), sa.ForeignKey("hospitals.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    # Rosters and the waitlist are both queries on hospital_id
    op.create_index("ix_patients_hospital_id", "patients", ["hospital_id"])

    op.create_table(
        "patient_disallowed_hospitals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "patient_id",
            sa.Uuid(),
            sa.ForeignKey("patients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("hospital_id", sa.Integer(), sa.ForeignKey("hospitals.id"), nullable=False),
        sa.UniqueConstraint("patient_id", "hospital_id", name="uq_patient_disallowed_hospital"),
    )
    op.create_index(
        "ix_patient_disallowed_hospitals_patient_id",
        "patient_disallowed_hospitals",
        ["patient_id"],
    )

    op.bulk_insert(hospitals, [{"name": name} for name in SEED_HOSPITALS])


def downgrade() -> None:
    op.drop_table("patient_disallowed_hospitals")
    op.drop_table("patients")
    op.drop_table("hospitals")
