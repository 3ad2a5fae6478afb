"""Tests for the SQLAlchemy assignment store and directory against SQLite."""

from __future__ import annotations

import asyncio
import random

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, OperationalError

from safeplace.adapters.persistence.database import Base, build_engine, build_session_factory
from safeplace.adapters.persistence.models import ProfessionalModel
from safeplace.adapters.persistence.repositories import (
    SqlAssignmentStore,
    SqlProfessionalDirectory,
    _store_errors,
)
from safeplace.application.use_cases.allocate_professional import AllocateProfessionalUseCase
from safeplace.domain.errors import Conflict, InvalidInput, NotFound, StoreUnavailable
from safeplace.domain.policies.selection import UniformRandomSelection
from safeplace.domain.value_objects.enums import ProfessionalCategory

COUNSELLOR = ProfessionalCategory.COUNSELLOR
LEGAL = ProfessionalCategory.LEGAL


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'routing.db'}", timeout=5)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = build_session_factory(engine)
    async with factory() as session:
        session.add_all([
            ProfessionalModel(id="c1", display_name="Asha", category="counsellor"),
            ProfessionalModel(id="c2", display_name="Bilal", category="counsellor"),
            ProfessionalModel(id="l1", display_name="Chen", category="legal"),
            ProfessionalModel(id="l2", display_name="Dana", category="legal", is_active=False),
        ])
        await session.commit()

    yield factory
    await engine.dispose()


# ─── Assignments ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_and_find(session_factory):
    async with session_factory() as session:
        store = SqlAssignmentStore(session)
        created = await store.create("v1", "c1", COUNSELLOR, "intake text")
        await session.commit()

    async with session_factory() as session:
        found = await SqlAssignmentStore(session).find("v1", COUNSELLOR)

    assert found is not None
    assert found.id == created.id
    assert found.professional_id == "c1"
    assert found.intake_summary == "intake text"
    assert found.is_first_contact is True
    assert found.transfer_origin is None


@pytest.mark.asyncio
async def test_find_missing_returns_none(session_factory):
    async with session_factory() as session:
        assert await SqlAssignmentStore(session).find("v1", LEGAL) is None


@pytest.mark.asyncio
async def test_duplicate_create_raises_conflict(session_factory):
    async with session_factory() as session:
        await SqlAssignmentStore(session).create("v1", "c1", COUNSELLOR)
        await session.commit()

    async with session_factory() as session:
        store = SqlAssignmentStore(session)
        with pytest.raises(Conflict) as exc:
            await store.create("v1", "c2", COUNSELLOR)
        assert exc.value.victim_id == "v1"

        # The session is usable again and still sees the winner
        winner = await store.find("v1", COUNSELLOR)
        assert winner.professional_id == "c1"


@pytest.mark.asyncio
async def test_create_rejects_category_mismatch(session_factory):
    async with session_factory() as session:
        with pytest.raises(InvalidInput):
            await SqlAssignmentStore(session).create("v1", "c1", LEGAL)


@pytest.mark.asyncio
async def test_create_rejects_unknown_professional(session_factory):
    async with session_factory() as session:
        with pytest.raises(NotFound):
            await SqlAssignmentStore(session).create("v1", "ghost", COUNSELLOR)


@pytest.mark.asyncio
async def test_create_rejects_self_transfer_origin(session_factory):
    async with session_factory() as session:
        with pytest.raises(InvalidInput):
            await SqlAssignmentStore(session).create(
                "v1", "c1", COUNSELLOR, transfer_origin="c1"
            )


@pytest.mark.asyncio
async def test_list_by_victim_and_professional(session_factory):
    async with session_factory() as session:
        store = SqlAssignmentStore(session)
        await store.create("v1", "c1", COUNSELLOR)
        await store.create("v1", "l1", LEGAL)
        await store.create("v2", "c1", COUNSELLOR)
        await session.commit()

        by_victim = await store.list_by_victim("v1")
        by_professional = await store.list_by_professional("c1")

    assert {a.category for a in by_victim} == {COUNSELLOR, LEGAL}
    assert [a.victim_id for a in by_professional] == ["v1", "v2"]


# ─── Transfers ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_transfer_creates_target_assignment(session_factory):
    async with session_factory() as session:
        store = SqlAssignmentStore(session)
        await store.create("v1", "c1", COUNSELLOR)
        await session.commit()

        moved = await store.transfer("v1", "c1", LEGAL, "l1", "custody dispute")
        await session.commit()

    assert moved.professional_id == "l1"
    assert moved.transfer_origin == "c1"
    assert moved.transfer_reason == "custody dispute"
    assert moved.transferred_at is not None
    assert moved.is_first_contact is False

    async with session_factory() as session:
        store = SqlAssignmentStore(session)
        counsellor = await store.find("v1", COUNSELLOR)
        history = await store.list_transfers("v1")

    assert counsellor.professional_id == "c1"
    assert len(history) == 1
    assert history[0].previous_professional_id is None
    assert history[0].to_professional_id == "l1"


@pytest.mark.asyncio
async def test_transfer_overwrites_within_category(session_factory):
    async with session_factory() as session:
        store = SqlAssignmentStore(session)
        await store.create("v1", "c1", COUNSELLOR, "intake")
        await session.commit()

        moved = await store.transfer("v1", "c1", COUNSELLOR, "c2", "")
        await session.commit()

        rows = await store.list_by_victim("v1")
        history = await store.list_transfers("v1")

    assert len(rows) == 1
    assert moved.professional_id == "c2"
    assert moved.intake_summary == "intake"
    assert history[0].previous_professional_id == "c1"


@pytest.mark.asyncio
async def test_transfer_to_self_rejected(session_factory):
    async with session_factory() as session:
        with pytest.raises(InvalidInput):
            await SqlAssignmentStore(session).transfer("v1", "c1", COUNSELLOR, "c1", "")


@pytest.mark.asyncio
async def test_transfer_update_integrity_error_propagates(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'fk.db'}", timeout=5)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = build_session_factory(engine)

    try:
        async with factory() as session:
            session.add_all([
                ProfessionalModel(id="c1", display_name="Asha", category="counsellor"),
                ProfessionalModel(id="c2", display_name="Bilal", category="counsellor"),
            ])
            await session.commit()

            store = SqlAssignmentStore(session)
            await store.create("v1", "c1", COUNSELLOR)
            await session.commit()

            # transfer_origin references a professional that does not exist
            with pytest.raises(IntegrityError):
                await store.transfer("v1", "ghost", COUNSELLOR, "c2", "")

        async with factory() as session:
            row = await SqlAssignmentStore(session).find("v1", COUNSELLOR)
        assert row.professional_id == "c1"
    finally:
        await engine.dispose()


# ─── First contact ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_mark_contacted(session_factory):
    async with session_factory() as session:
        store = SqlAssignmentStore(session)
        await store.create("v1", "c1", COUNSELLOR)
        await store.create("v1", "l1", LEGAL)
        await session.commit()

        assert await store.mark_contacted("v1") == 2
        assert await store.mark_contacted("v1") == 0
        assert await store.mark_contacted("nobody") == 0
        await session.commit()

    async with session_factory() as session:
        rows = await SqlAssignmentStore(session).list_by_victim("v1")
    assert not any(a.is_first_contact for a in rows)


# ─── Directory ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_directory_lists_active_by_category(session_factory):
    async with session_factory() as session:
        directory = SqlProfessionalDirectory(session)
        counsellors = await directory.list_by_category(COUNSELLOR)
        legal = await directory.list_by_category(LEGAL)
        inactive = await directory.get_by_id("l2")
        missing = await directory.get_by_id("ghost")

    assert [p.id for p in counsellors] == ["c1", "c2"]
    assert [p.id for p in legal] == ["l1"]
    assert inactive is not None and inactive.is_active is False
    assert missing is None


# ─── Concurrency ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_concurrent_allocations_converge_on_one_row(session_factory):
    async def allocate(seed: int):
        async with session_factory() as session:
            uc = AllocateProfessionalUseCase(
                store=SqlAssignmentStore(session),
                directory=SqlProfessionalDirectory(session),
                selector=UniformRandomSelection(random.Random(seed)),
            )
            result = await uc.execute("v1", "counsellor")
            await session.commit()
            return result

    results = await asyncio.gather(*[allocate(i) for i in range(6)])

    assert len({r.professional.id for r in results}) == 1
    assert sum(not r.is_existing for r in results) == 1

    async with session_factory() as session:
        rows = await SqlAssignmentStore(session).list_by_victim("v1")
    assert len(rows) == 1
    assert rows[0].professional_id == results[0].professional.id


# ─── Error translation ──────────────────────────────────────────────


def test_connection_errors_become_store_unavailable():
    with pytest.raises(StoreUnavailable) as exc:
        with _store_errors("find"):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
    assert exc.value.retryable


def test_timeouts_become_store_unavailable():
    with pytest.raises(StoreUnavailable):
        with _store_errors("create"):
            raise TimeoutError()
