"""AllocateProfessionalUseCase — stable victim → professional pairing per category."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from safeplace.application.ports.assignment_store import AssignmentStore
from safeplace.application.ports.directory import ProfessionalDirectory
from safeplace.domain.entities.professional import Professional
from safeplace.domain.errors import (
    Conflict,
    InvalidInput,
    NoProfessionalsAvailable,
    NotFound,
)
from safeplace.domain.policies.selection import SelectionStrategy, UniformRandomSelection
from safeplace.domain.value_objects.enums import ProfessionalCategory

logger = logging.getLogger(__name__)


@dataclass
class AllocationResult:
    """Outcome of one allocation request."""

    professional: Professional
    category: ProfessionalCategory
    is_existing: bool


async def eligible_professionals(
    directory: ProfessionalDirectory, category: ProfessionalCategory
) -> list[Professional]:
    """Directory listing for *category*, restricted to active exact matches."""
    listed = await directory.list_by_category(category)
    eligible = [p for p in listed if p.handles(category)]
    if len(eligible) != len(listed):
        logger.warning(
            "Directory returned %d professional(s) not eligible for %s, discarded",
            len(listed) - len(eligible), category.value,
        )
    return eligible


class AllocateProfessionalUseCase:
    """Return the victim's professional for a category, assigning one if needed.

    Allocation is a stable decision: once a professional has been assigned
    for (victim, category), every later call returns that same professional.
    """

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
        victim_id: str,
        category: str | ProfessionalCategory,
        intake_summary: str | None = None,
    ) -> AllocationResult:
        """Allocate a professional for *victim_id* in *category*.

        Pipeline:
        1. Existing assignment → return it (is_existing=True)
        2. List eligible professionals from the directory
        3. Select one via the strategy
        4. Persist; on Conflict (lost race) return the winner instead

        Raises:
            InvalidCategory: category outside the enumeration.
            NoProfessionalsAvailable: directory empty for the category.
            NotFound: assigned professional missing from the directory.
        """
        category = ProfessionalCategory.parse(category)
        if not victim_id or not victim_id.strip():
            raise InvalidInput("Victim id is required")

        existing = await self._lookup(victim_id, category)
        if existing is not None:
            logger.info(
                "Victim %s: existing %s assignment → %s",
                victim_id, category.value, existing.professional.id,
            )
            return existing

        candidates = await eligible_professionals(self._directory, category)
        if not candidates:
            logger.warning("Victim %s: no %s available", victim_id, category.value)
            raise NoProfessionalsAvailable(category.display_name)

        chosen = self._selector.select_one(candidates)

        try:
            await self._store.create(
                victim_id, chosen.id, category, (intake_summary or "").strip()
            )
        except Conflict:
            # A concurrent request won the race; converge on its choice.
            logger.info(
                "Victim %s: concurrent %s allocation detected, returning winner",
                victim_id, category.value,
            )
            winner = await self._lookup(victim_id, category)
            if winner is None:
                raise
            return winner

        logger.info(
            "Victim %s → %s %s (%d candidate(s))",
            victim_id, category.value, chosen.id, len(candidates),
        )
        return AllocationResult(professional=chosen, category=category, is_existing=False)

    async def _lookup(
        self, victim_id: str, category: ProfessionalCategory
    ) -> AllocationResult | None:
        assignment = await self._store.find(victim_id, category)
        if assignment is None:
            return None
        professional = await self._directory.get_by_id(assignment.professional_id)
        if professional is None:
            raise NotFound(
                f"Assigned professional {assignment.professional_id} is not in the directory"
            )
        return AllocationResult(professional=professional, category=category, is_existing=True)
