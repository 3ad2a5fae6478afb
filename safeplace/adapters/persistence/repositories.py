"""SQLAlchemy repository implementations."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from safeplace.adapters.persistence.models import (
    AssignmentModel,
    ProfessionalModel,
    TransferModel,
    utc_now,
)
from safeplace.application.ports.assignment_store import AssignmentStore
from safeplace.application.ports.directory import ProfessionalDirectory
from safeplace.domain.entities.assignment import Assignment
from safeplace.domain.entities.professional import Professional
from safeplace.domain.entities.transfer_record import TransferRecord
from safeplace.domain.errors import Conflict, InvalidInput, NotFound, StoreUnavailable
from safeplace.domain.value_objects.enums import ProfessionalCategory

logger = logging.getLogger(__name__)

# ─── Mappers ─────────────────────────────────────────────────────────


def _professional_to_domain(m: ProfessionalModel) -> Professional:
    return Professional(
        id=m.id,
        display_name=m.display_name,
        category=ProfessionalCategory(m.category),
        email=m.email,
        phone=m.phone,
        is_active=m.is_active,
    )


def _assignment_to_domain(m: AssignmentModel) -> Assignment:
    return Assignment(
        id=m.id,
        victim_id=m.victim_id,
        professional_id=m.professional_id,
        category=ProfessionalCategory(m.category),
        assigned_at=m.assigned_at,
        intake_summary=m.intake_summary or "",
        is_first_contact=m.is_first_contact,
        transfer_origin=m.transfer_origin,
        transfer_reason=m.transfer_reason,
        transferred_at=m.transferred_at,
    )


def _transfer_to_domain(m: TransferModel) -> TransferRecord:
    return TransferRecord(
        id=m.id,
        victim_id=m.victim_id,
        category=ProfessionalCategory(m.category),
        from_professional_id=m.from_professional_id,
        previous_professional_id=m.previous_professional_id,
        to_professional_id=m.to_professional_id,
        reason=m.reason,
        transferred_at=m.transferred_at,
    )


@contextmanager
def _store_errors(operation: str):
    """Translate connectivity failures into StoreUnavailable. No retries here."""
    try:
        yield
    except (OperationalError, InterfaceError, OSError, asyncio.TimeoutError) as e:
        logger.error("Assignment store %s failed: %s", operation, e)
        raise StoreUnavailable(f"Assignment store unavailable during {operation}") from e
    except DBAPIError as e:
        if not e.connection_invalidated:
            raise
        logger.error("Assignment store %s lost its connection: %s", operation, e)
        raise StoreUnavailable(f"Assignment store unavailable during {operation}") from e


# ─── Repositories ────────────────────────────────────────────────────


class SqlAssignmentStore(AssignmentStore):
    """Assignment store bound to one AsyncSession (one unit of work).

    Writes are flushed, not committed; the caller owns the transaction.
    A Conflict rolls the session back, so create()/transfer() should be the
    first write of their unit of work.
    """

    def __init__(self, session: AsyncSession):
        self._s = session

    async def find(self, victim_id, category):
        with _store_errors("find"):
            result = await self._s.execute(
                select(AssignmentModel).where(
                    AssignmentModel.victim_id == victim_id,
                    AssignmentModel.category == category.value,
                )
            )
            m = result.scalar_one_or_none()
        return _assignment_to_domain(m) if m else None

    async def create(
        self,
        victim_id,
        professional_id,
        category,
        intake_summary="",
        *,
        is_first_contact=True,
        transfer_origin=None,
        transfer_reason=None,
    ):
        if transfer_origin is not None and transfer_origin == professional_id:
            raise InvalidInput("Transfer origin must differ from the assigned professional")

        now = utc_now()
        m = AssignmentModel(
            victim_id=victim_id,
            professional_id=professional_id,
            category=category.value,
            intake_summary=intake_summary or "",
            assigned_at=now,
            is_first_contact=is_first_contact,
            transfer_origin=transfer_origin,
            transfer_reason=transfer_reason,
            transferred_at=now if transfer_origin else None,
        )
        with _store_errors("create"):
            await self._check_professional(professional_id, category)
            self._s.add(m)
            await self._flush_or_conflict(victim_id, category)
        return _assignment_to_domain(m)

    async def list_by_victim(self, victim_id):
        with _store_errors("list_by_victim"):
            result = await self._s.execute(
                select(AssignmentModel)
                .where(AssignmentModel.victim_id == victim_id)
                .order_by(AssignmentModel.id)
            )
            return [_assignment_to_domain(m) for m in result.scalars()]

    async def list_by_professional(self, professional_id):
        with _store_errors("list_by_professional"):
            result = await self._s.execute(
                select(AssignmentModel)
                .where(AssignmentModel.professional_id == professional_id)
                .order_by(AssignmentModel.assigned_at, AssignmentModel.id)
            )
            return [_assignment_to_domain(m) for m in result.scalars()]

    async def transfer(
        self, victim_id, from_professional_id, to_category, to_professional_id, reason
    ):
        if from_professional_id == to_professional_id:
            raise InvalidInput("Transfer target must differ from the requesting professional")

        now = utc_now()
        with _store_errors("transfer"):
            await self._check_professional(to_professional_id, to_category)
            result = await self._s.execute(
                select(AssignmentModel)
                .where(
                    AssignmentModel.victim_id == victim_id,
                    AssignmentModel.category == to_category.value,
                )
                .with_for_update()
            )
            m = result.scalar_one_or_none()
            previous = m.professional_id if m else None
            inserted = m is None

            if m is None:
                # A transferred case is not a fresh intake.
                m = AssignmentModel(
                    victim_id=victim_id,
                    professional_id=to_professional_id,
                    category=to_category.value,
                    intake_summary="",
                    assigned_at=now,
                    is_first_contact=False,
                    transfer_origin=from_professional_id,
                    transfer_reason=reason,
                    transferred_at=now,
                )
                self._s.add(m)
            else:
                m.professional_id = to_professional_id
                m.transfer_origin = from_professional_id
                m.transfer_reason = reason
                m.transferred_at = now

            self._s.add(
                TransferModel(
                    victim_id=victim_id,
                    category=to_category.value,
                    from_professional_id=from_professional_id,
                    previous_professional_id=previous,
                    to_professional_id=to_professional_id,
                    reason=reason or "",
                    transferred_at=now,
                )
            )
            await self._flush_or_conflict(victim_id, to_category, inserted=inserted)
        return _assignment_to_domain(m)

    async def mark_contacted(self, victim_id):
        with _store_errors("mark_contacted"):
            result = await self._s.execute(
                update(AssignmentModel)
                .where(
                    AssignmentModel.victim_id == victim_id,
                    AssignmentModel.is_first_contact.is_(True),
                )
                .values(is_first_contact=False)
            )
            await self._s.flush()
        return result.rowcount or 0

    async def list_transfers(self, victim_id):
        with _store_errors("list_transfers"):
            result = await self._s.execute(
                select(TransferModel)
                .where(TransferModel.victim_id == victim_id)
                .order_by(TransferModel.transferred_at, TransferModel.id)
            )
            return [_transfer_to_domain(m) for m in result.scalars()]

    async def _check_professional(
        self, professional_id: str, category: ProfessionalCategory
    ) -> None:
        """Assigned professional must exist and belong to the category."""
        p = await self._s.get(ProfessionalModel, professional_id)
        if p is None:
            raise NotFound(f"Professional {professional_id} not found")
        if p.category != category.value:
            raise InvalidInput(
                f"Professional {professional_id} is not a {category.display_name}"
            )

    async def _flush_or_conflict(
        self, victim_id: str, category: ProfessionalCategory, *, inserted: bool = True
    ) -> None:
        """Flush; a duplicate (victim, category) insert becomes Conflict.

        Updates of an existing row cannot collide on the natural key, so
        their integrity errors always propagate unchanged.
        """
        try:
            await self._s.flush()
        except IntegrityError as e:
            await self._s.rollback()
            if not inserted:
                raise
            # Only the natural-key violation is a Conflict; anything else propagates.
            if await self.find(victim_id, category) is None:
                raise
            logger.info(
                "Unique (victim, category) violation for %s/%s", victim_id, category.value
            )
            raise Conflict(victim_id, category.value) from e


class SqlProfessionalDirectory(ProfessionalDirectory):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def list_by_category(self, category):
        with _store_errors("list_by_category"):
            result = await self._s.execute(
                select(ProfessionalModel)
                .where(
                    ProfessionalModel.category == category.value,
                    ProfessionalModel.is_active.is_(True),
                )
                .order_by(ProfessionalModel.id)
            )
            return [_professional_to_domain(m) for m in result.scalars()]

    async def get_by_id(self, professional_id):
        with _store_errors("get_by_id"):
            m = await self._s.get(ProfessionalModel, professional_id)
        return _professional_to_domain(m) if m else None


async def commit_unit_of_work(session: AsyncSession) -> None:
    """Commit the request's unit of work, surfacing outages as StoreUnavailable."""
    with _store_errors("commit"):
        await session.commit()
