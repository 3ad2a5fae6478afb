"""Read-side use cases — who is a victim talking to, whom does a professional serve."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from safeplace.application.ports.assignment_store import AssignmentStore
from safeplace.application.ports.directory import ProfessionalDirectory
from safeplace.domain.entities.assignment import Assignment
from safeplace.domain.entities.caller import Caller
from safeplace.domain.entities.professional import Professional
from safeplace.domain.entities.transfer_record import TransferRecord
from safeplace.domain.errors import Forbidden
from safeplace.domain.value_objects.enums import CallerRole

logger = logging.getLogger(__name__)


@dataclass
class AssignedProfessional:
    professional: Professional
    assignment: Assignment


class ListVictimAssignmentsUseCase:
    def __init__(self, store: AssignmentStore, directory: ProfessionalDirectory):
        self._store = store
        self._directory = directory

    async def execute(self, victim_id: str) -> list[AssignedProfessional]:
        result = []
        for assignment in await self._store.list_by_victim(victim_id):
            professional = await self._directory.get_by_id(assignment.professional_id)
            if professional is None:
                logger.warning(
                    "Victim %s: professional %s missing from directory, skipped",
                    victim_id, assignment.professional_id,
                )
                continue
            result.append(AssignedProfessional(professional=professional, assignment=assignment))
        return result


class ListProfessionalCaseloadUseCase:
    def __init__(self, store: AssignmentStore):
        self._store = store

    async def execute(self, caller: Caller) -> list[Assignment]:
        if not caller.is_professional():
            raise Forbidden(
                "Only counsellors and legal advisors can access this endpoint"
            )
        return await self._store.list_by_professional(caller.caller_id)


class MarkContactedUseCase:
    def __init__(self, store: AssignmentStore):
        self._store = store

    async def execute(self, victim_id: str) -> None:
        changed = await self._store.mark_contacted(victim_id)
        logger.info("Victim %s: first contact cleared on %d assignment(s)", victim_id, changed)


class TransferHistoryUseCase:
    """Transfer log for a victim, visible to the victim, admins and their professionals."""

    def __init__(self, store: AssignmentStore):
        self._store = store

    async def execute(self, caller: Caller, victim_id: str) -> list[TransferRecord]:
        if caller.role == CallerRole.VICTIM and caller.caller_id != victim_id:
            raise Forbidden("Victims can only view their own transfer history")
        if caller.is_professional():
            held = await self._store.list_by_victim(victim_id)
            if not any(a.is_held_by(caller.caller_id) for a in held):
                raise Forbidden("No assignment found for this victim")
        return await self._store.list_transfers(victim_id)
