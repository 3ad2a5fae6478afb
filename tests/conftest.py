"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timezone

import pytest

from safeplace.application.ports.assignment_store import AssignmentStore
from safeplace.application.ports.directory import ProfessionalDirectory
from safeplace.domain.entities.assignment import Assignment
from safeplace.domain.entities.professional import Professional
from safeplace.domain.entities.transfer_record import TransferRecord
from safeplace.domain.errors import Conflict, InvalidInput, NotFound
from safeplace.domain.value_objects.enums import ProfessionalCategory

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeDirectory(ProfessionalDirectory):
    def __init__(self, professionals: list[Professional] | None = None):
        self.professionals = {p.id: p for p in professionals or []}

    def add(self, professional: Professional) -> Professional:
        self.professionals[professional.id] = professional
        return professional

    async def list_by_category(self, category):
        await asyncio.sleep(0)
        return [p for p in self.professionals.values() if p.handles(category)]

    async def get_by_id(self, professional_id):
        return self.professionals.get(professional_id)


class FakeAssignmentStore(AssignmentStore):
    """Dict-backed store. Yields to the event loop between reads and writes
    so concurrent callers can interleave the way separate requests do."""

    def __init__(self, directory: FakeDirectory | None = None):
        self.rows: dict[tuple[str, ProfessionalCategory], Assignment] = {}
        self.transfers: list[TransferRecord] = []
        self.create_calls = 0
        self._directory = directory
        self._ids = itertools.count(1)

    async def find(self, victim_id, category):
        await asyncio.sleep(0)
        return self.rows.get((victim_id, category))

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
        self.create_calls += 1
        await asyncio.sleep(0)
        if transfer_origin is not None and transfer_origin == professional_id:
            raise InvalidInput("Transfer origin must differ from the assigned professional")
        self._check_professional(professional_id, category)
        if (victim_id, category) in self.rows:
            raise Conflict(victim_id, category.value)

        now = datetime.now(timezone.utc)
        assignment = Assignment(
            id=next(self._ids),
            victim_id=victim_id,
            professional_id=professional_id,
            category=category,
            assigned_at=now,
            intake_summary=intake_summary or "",
            is_first_contact=is_first_contact,
            transfer_origin=transfer_origin,
            transfer_reason=transfer_reason,
            transferred_at=now if transfer_origin else None,
        )
        self.rows[(victim_id, category)] = assignment
        return assignment

    async def list_by_victim(self, victim_id):
        return sorted(
            (a for a in self.rows.values() if a.victim_id == victim_id), key=lambda a: a.id
        )

    async def list_by_professional(self, professional_id):
        return sorted(
            (a for a in self.rows.values() if a.professional_id == professional_id),
            key=lambda a: (a.assigned_at, a.id),
        )

    async def transfer(
        self, victim_id, from_professional_id, to_category, to_professional_id, reason
    ):
        if from_professional_id == to_professional_id:
            raise InvalidInput("Transfer target must differ from the requesting professional")
        self._check_professional(to_professional_id, to_category)

        now = datetime.now(timezone.utc)
        existing = self.rows.get((victim_id, to_category))
        previous = existing.professional_id if existing else None
        if existing is None:
            existing = await self.create(
                victim_id, to_professional_id, to_category,
                is_first_contact=False,
                transfer_origin=from_professional_id,
                transfer_reason=reason,
            )
        else:
            existing.professional_id = to_professional_id
            existing.transfer_origin = from_professional_id
            existing.transfer_reason = reason
            existing.transferred_at = now

        self.transfers.append(
            TransferRecord(
                id=len(self.transfers) + 1,
                victim_id=victim_id,
                category=to_category,
                from_professional_id=from_professional_id,
                to_professional_id=to_professional_id,
                transferred_at=now,
                previous_professional_id=previous,
                reason=reason or "",
            )
        )
        return existing

    async def mark_contacted(self, victim_id):
        changed = 0
        for a in self.rows.values():
            if a.victim_id == victim_id and a.is_first_contact:
                a.is_first_contact = False
                changed += 1
        return changed

    async def list_transfers(self, victim_id):
        return [t for t in self.transfers if t.victim_id == victim_id]

    def _check_professional(self, professional_id, category):
        if self._directory is None:
            return
        p = self._directory.professionals.get(professional_id)
        if p is None:
            raise NotFound(f"Professional {professional_id} not found")
        if p.category != category:
            raise InvalidInput(f"Professional {professional_id} is not a {category.display_name}")


# ─── Fixtures ───────────────────────────────────────────────────────


def make_professional(
    pid: str,
    category: ProfessionalCategory = ProfessionalCategory.COUNSELLOR,
    is_active: bool = True,
) -> Professional:
    return Professional(
        id=pid,
        display_name=f"Dr. {pid.title()}",
        category=category,
        email=f"{pid}@safeplace.test",
        is_active=is_active,
    )


@pytest.fixture
def directory():
    return FakeDirectory([
        make_professional("c1", ProfessionalCategory.COUNSELLOR),
        make_professional("c2", ProfessionalCategory.COUNSELLOR),
        make_professional("l1", ProfessionalCategory.LEGAL),
        make_professional("l2", ProfessionalCategory.LEGAL),
    ])


@pytest.fixture
def store(directory):
    return FakeAssignmentStore(directory)


@pytest.fixture
def legal_description():
    return "My husband took the kids and I need a lawyer for custody in court"


@pytest.fixture
def distress_description():
    return "I feel so scared and alone, I cry every night"


@pytest.fixture
def professional_factory():
    return make_professional


@pytest.fixture
def directory_factory():
    return FakeDirectory


@pytest.fixture
def store_factory():
    return FakeAssignmentStore
