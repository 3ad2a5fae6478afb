"""Routing error taxonomy.

Every failure the routing core reports to its callers is one of these.
The HTTP layer maps each class to a status code; nothing in the domain or
application layers knows about HTTP.
"""

from __future__ import annotations


class RoutingError(Exception):
    """Base class for all routing failures."""

    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(RoutingError):
    """Malformed or empty request data."""


class InvalidCategory(RoutingError):
    """Category outside the fixed counsellor/legal enumeration."""

    def __init__(self, value: object):
        super().__init__(f"Invalid professional category: {value!r}")
        self.value = value


class Forbidden(RoutingError):
    """Role or ownership check failed."""


class NotFound(RoutingError):
    """Lookup on a key that does not exist."""


class Conflict(RoutingError):
    """An assignment already exists for the (victim, category) pair."""

    def __init__(self, victim_id: str, category: str):
        super().__init__(
            f"Assignment already exists for victim {victim_id} in category {category}"
        )
        self.victim_id = victim_id
        self.category = category


class NoProfessionalsAvailable(RoutingError):
    """The directory has nobody to route to for the requested category."""

    def __init__(self, category_label: str):
        super().__init__(
            f"No {category_label} available at the moment. Please contact support."
        )
        self.category_label = category_label


class StoreUnavailable(RoutingError):
    """Persistence layer unreachable or timed out."""

    retryable = True
