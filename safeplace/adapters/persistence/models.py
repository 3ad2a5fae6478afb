"""SQLAlchemy ORM models — maps to the routing tables."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from safeplace.adapters.persistence.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProfessionalModel(Base):
    """Local mirror of the user-management directory (read-only to the core)."""

    __tablename__ = "professionals"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("category IN ('counsellor', 'legal')", name="ck_professionals_category"),
        Index("idx_professionals_category", "category"),
    )


class AssignmentModel(Base):
    __tablename__ = "victim_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    victim_id: Mapped[str] = mapped_column(String(64), nullable=False)
    professional_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("professionals.id"), nullable=False
    )
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    intake_summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    is_first_contact: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    transfer_origin: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("professionals.id"), nullable=True
    )
    transfer_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    transferred_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        # One assignment per (victim, category); concurrent allocations race on this.
        UniqueConstraint("victim_id", "category", name="uq_victim_assignment_category"),
        CheckConstraint("category IN ('counsellor', 'legal')", name="ck_victim_assignments_category"),
        CheckConstraint(
            "transfer_origin IS NULL OR transfer_origin <> professional_id",
            name="ck_victim_assignments_transfer_origin",
        ),
        Index("idx_assignments_professional", "professional_id"),
    )


class TransferModel(Base):
    """Append-only transfer log; never updated or deleted by the core."""

    __tablename__ = "assignment_transfers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    victim_id: Mapped[str] = mapped_column(String(64), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    from_professional_id: Mapped[str] = mapped_column(String(64), nullable=False)
    previous_professional_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    to_professional_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    transferred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (Index("idx_transfers_victim", "victim_id"),)
