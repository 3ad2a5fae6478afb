"""CSV value normalization — column names, blanks, roles and flags."""

from __future__ import annotations

import re

from safeplace.domain.value_objects.enums import ProfessionalCategory

# Role spellings seen in user-management exports → routing category
ROLE_ALIASES: dict[str, ProfessionalCategory] = {
    "counsellor": ProfessionalCategory.COUNSELLOR,
    "counselor": ProfessionalCategory.COUNSELLOR,
    "counselling": ProfessionalCategory.COUNSELLOR,
    "therapist": ProfessionalCategory.COUNSELLOR,
    "legal": ProfessionalCategory.LEGAL,
    "legal advisor": ProfessionalCategory.LEGAL,
    "legal adviser": ProfessionalCategory.LEGAL,
    "lawyer": ProfessionalCategory.LEGAL,
    "advocate": ProfessionalCategory.LEGAL,
}

_FALSE_VALUES = {"0", "false", "no", "n", "inactive", "disabled"}


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Replaces runs of spaces / non-breaking spaces with single underscore
    - Lowercases
    - Strips non-alphanumeric characters (except underscore)
    """
    name = name.replace("\ufeff", "").strip()
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    return re.sub(r"[^\w]", "", name, flags=re.UNICODE)


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_category(raw: str | None) -> ProfessionalCategory | None:
    """Map a role string to a routing category; None for non-professional roles."""
    if not raw:
        return None
    key = re.sub(r"[\s_\-]+", " ", raw.strip().lower())
    return ROLE_ALIASES.get(key)


def parse_active(raw: str | None) -> bool:
    """Blank means active; only explicit negatives deactivate."""
    if raw is None or not raw.strip():
        return True
    return raw.strip().lower() not in _FALSE_VALUES
