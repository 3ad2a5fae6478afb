"""Professional entity — a counsellor or legal advisor from the directory."""

from dataclasses import dataclass

from safeplace.domain.value_objects.enums import ProfessionalCategory


@dataclass
class Professional:
    id: str
    display_name: str
    category: ProfessionalCategory
    email: str | None = None
    phone: str | None = None
    is_active: bool = True

    def handles(self, category: ProfessionalCategory) -> bool:
        return self.is_active and self.category == category
