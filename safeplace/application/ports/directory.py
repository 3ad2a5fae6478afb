"""Port interface for the professional directory (read-only)."""

from abc import ABC, abstractmethod

from safeplace.domain.entities.professional import Professional
from safeplace.domain.value_objects.enums import ProfessionalCategory


class ProfessionalDirectory(ABC):
    @abstractmethod
    async def list_by_category(self, category: ProfessionalCategory) -> list[Professional]:
        """Return only professionals whose category exactly matches."""
        ...

    @abstractmethod
    async def get_by_id(self, professional_id: str) -> Professional | None:
        ...
