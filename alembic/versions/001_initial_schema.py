"""Initial schema — professionals, victim assignments, transfer log.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Professionals (directory mirror)
    op.create_table(
        "professionals",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.CheckConstraint(
            "category IN ('counsellor', 'legal')", name="ck_professionals_category"
        ),
    )
    op.create_index("idx_professionals_category", "professionals", ["category"])

    # Victim assignments
    op.create_table(
        "victim_assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("victim_id", sa.String(64), nullable=False),
        sa.Column(
            "professional_id", sa.String(64), sa.ForeignKey("professionals.id"), nullable=False
        ),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("intake_summary", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("is_first_contact", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "transfer_origin", sa.String(64), sa.ForeignKey("professionals.id"), nullable=True
        ),
        sa.Column("transfer_reason", sa.Text, nullable=True),
        sa.Column("transferred_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("victim_id", "category", name="uq_victim_assignment_category"),
        sa.CheckConstraint(
            "category IN ('counsellor', 'legal')", name="ck_victim_assignments_category"
        ),
        sa.CheckConstraint(
            "transfer_origin IS NULL OR transfer_origin <> professional_id",
            name="ck_victim_assignments_transfer_origin",
        ),
    )
    op.create_index("idx_assignments_professional", "victim_assignments", ["professional_id"])

    # Transfer log (append-only)
    op.create_table(
        "assignment_transfers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("victim_id", sa.String(64), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("from_professional_id", sa.String(64), nullable=False),
        sa.Column("previous_professional_id", sa.String(64), nullable=True),
        sa.Column("to_professional_id", sa.String(64), nullable=False),
        sa.Column("reason", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "transferred_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_transfers_victim", "assignment_transfers", ["victim_id"])


def downgrade() -> None:
    op.drop_table("assignment_transfers")
    op.drop_table("victim_assignments")
    op.drop_table("professionals")
