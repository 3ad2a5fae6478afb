"""Caller — the authenticated subject on whose behalf an operation runs."""

from dataclasses import dataclass

from safeplace.domain.value_objects.enums import CallerRole


@dataclass(frozen=True)
class Caller:
    caller_id: str
    role: CallerRole

    def is_professional(self) -> bool:
        return self.role.is_professional()
