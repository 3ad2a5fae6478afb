"""Assignment entity — the current pairing of a victim with a professional."""

from dataclasses import dataclass
from datetime import datetime

from safeplace.domain.value_objects.enums import ProfessionalCategory


@dataclass
class Assignment:
    id: int | None
    victim_id: str
    professional_id: str
    category: ProfessionalCategory
    assigned_at: datetime
    intake_summary: str = ""
    is_first_contact: bool = True
    transfer_origin: str | None = None
    transfer_reason: str | None = None
    transferred_at: datetime | None = None

    def is_held_by(self, professional_id: str) -> bool:
        return self.professional_id == professional_id

    def was_transferred(self) -> bool:
        return self.transfer_origin is not None
