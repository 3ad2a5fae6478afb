"""Port interface for assignment persistence."""

from abc import ABC, abstractmethod

from safeplace.domain.entities.assignment import Assignment
from safeplace.domain.entities.transfer_record import TransferRecord
from safeplace.domain.value_objects.enums import ProfessionalCategory


class AssignmentStore(ABC):
    @abstractmethod
    async def find(
        self, victim_id: str, category: ProfessionalCategory
    ) -> Assignment | None:
        ...

    @abstractmethod
    async def create(
        self,
        victim_id: str,
        professional_id: str,
        category: ProfessionalCategory,
        intake_summary: str = "",
        *,
        is_first_contact: bool = True,
        transfer_origin: str | None = None,
        transfer_reason: str | None = None,
    ) -> Assignment:
        """Insert a new assignment.

        Must raise Conflict atomically when (victim_id, category) already
        exists, even if a concurrent caller inserted it after our find().
        """
        ...

    @abstractmethod
    async def list_by_victim(self, victim_id: str) -> list[Assignment]:
        ...

    @abstractmethod
    async def list_by_professional(self, professional_id: str) -> list[Assignment]:
        ...

    @abstractmethod
    async def transfer(
        self,
        victim_id: str,
        from_professional_id: str,
        to_category: ProfessionalCategory,
        to_professional_id: str,
        reason: str,
    ) -> Assignment:
        """Overwrite or create the (victim_id, to_category) assignment and log the transfer."""
        ...

    @abstractmethod
    async def mark_contacted(self, victim_id: str) -> int:
        """Clear is_first_contact on all of the victim's assignments. Idempotent.

        Returns the number of assignments that changed.
        """
        ...

    @abstractmethod
    async def list_transfers(self, victim_id: str) -> list[TransferRecord]:
        """Transfer log for one victim, oldest first."""
        ...
