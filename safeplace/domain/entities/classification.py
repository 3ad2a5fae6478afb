"""Classification result — transient output of the situation classifier."""

from dataclasses import dataclass, field

from safeplace.domain.value_objects.enums import ProfessionalCategory


@dataclass(frozen=True)
class ClassificationResult:
    recommended_category: ProfessionalCategory
    rationale: str
    score_breakdown: dict[str, int]
    matched_keywords: dict[str, list[str]] = field(default_factory=dict)
