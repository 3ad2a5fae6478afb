"""Domain enums — pure Python, no external dependencies."""

from enum import Enum

from safeplace.domain.errors import InvalidCategory


class ProfessionalCategory(str, Enum):
    COUNSELLOR = "counsellor"
    LEGAL = "legal"

    @classmethod
    def parse(cls, value: "str | ProfessionalCategory") -> "ProfessionalCategory":
        """Strict lookup: anything outside the enumeration is InvalidCategory."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidCategory(value) from None

    @property
    def display_name(self) -> str:
        return "counsellor" if self is ProfessionalCategory.COUNSELLOR else "legal advisor"


class CallerRole(str, Enum):
    VICTIM = "victim"
    COUNSELLOR = "counsellor"
    LEGAL = "legal"
    ADMIN = "admin"

    def is_professional(self) -> bool:
        return self in (CallerRole.COUNSELLOR, CallerRole.LEGAL)
