"""TransferRecord — one entry of the append-only transfer log."""

from dataclasses import dataclass
from datetime import datetime

from safeplace.domain.value_objects.enums import ProfessionalCategory


@dataclass
class TransferRecord:
    id: int | None
    victim_id: str
    category: ProfessionalCategory
    from_professional_id: str
    to_professional_id: str
    transferred_at: datetime
    previous_professional_id: str | None = None  # None when the category was new
    reason: str = ""
