"""TransferCaseUseCase — hand a victim's case over to another professional."""

from __future__ import annotations

import logging

from safeplace.application.ports.assignment_store import AssignmentStore
from safeplace.application.ports.directory import ProfessionalDirectory
from safeplace.application.use_cases.allocate_professional import eligible_professionals
from safeplace.domain.entities.caller import Caller
from safeplace.domain.entities.professional import Professional
from safeplace.domain.errors import Forbidden, InvalidInput, NoProfessionalsAvailable
from safeplace.domain.policies.selection import SelectionStrategy, UniformRandomSelection
from safeplace.domain.value_objects.enums import ProfessionalCategory

logger = logging.getLogger(__name__)


class TransferCaseUseCase:
    """Re-point (or create) the victim's assignment for a target category."""

    def __init__(
        self,
        store: AssignmentStore,
        directory: ProfessionalDirectory,
        selector: SelectionStrategy | None = None,
    ):
        self._store = store
        self._directory = directory
        self._selector = selector or UniformRandomSelection()

    async def execute(
        self,
        caller: Caller,
        victim_id: str,
        new_category: str | ProfessionalCategory,
        reason: str | None = None,
    ) -> Professional:
        """Transfer *victim_id* to a professional of *new_category*.

        The caller is the requesting professional. They must currently hold
        an assignment for the victim in some category. The requester is never
        picked as the target, so a same-category transfer is a reassignment
        to a colleague.

        Raises:
            Forbidden: caller is not a professional, or holds no assignment
                for the victim.
            InvalidCategory: new_category outside the enumeration.
            NoProfessionalsAvailable: nobody else to transfer to.
        """
        if not caller.is_professional():
            raise Forbidden("Only counsellors and legal advisors can transfer chats")
        new_category = ProfessionalCategory.parse(new_category)
        if not victim_id or not victim_id.strip():
            raise InvalidInput("Victim id is required")

        held = await self._store.list_by_victim(victim_id)
        if not any(a.is_held_by(caller.caller_id) for a in held):
            logger.warning(
                "Transfer refused: %s holds no assignment for victim %s",
                caller.caller_id, victim_id,
            )
            raise Forbidden("No assignment found for this victim")

        candidates = [
            p for p in await eligible_professionals(self._directory, new_category)
            if p.id != caller.caller_id
        ]
        if not candidates:
            raise NoProfessionalsAvailable(new_category.display_name)

        chosen = self._selector.select_one(candidates)
        await self._store.transfer(
            victim_id, caller.caller_id, new_category, chosen.id, (reason or "").strip()
        )

        logger.info(
            "Victim %s transferred by %s → %s %s",
            victim_id, caller.caller_id, new_category.value, chosen.id,
        )
        return chosen
