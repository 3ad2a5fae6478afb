"""ClassificationPolicy — keyword scoring of a free-text situation description."""

from __future__ import annotations

from dataclasses import dataclass

from safeplace.domain.entities.classification import ClassificationResult
from safeplace.domain.errors import InvalidInput
from safeplace.domain.value_objects.enums import ProfessionalCategory

LEGAL_KEYWORDS: tuple[str, ...] = (
    "law", "legal", "court", "police", "rights", "divorce", "custody",
    "judge", "lawyer", "fir", "complaint", "case", "protection order",
)

COUNSELLOR_KEYWORDS: tuple[str, ...] = (
    "sad", "depressed", "scared", "fear", "anxiety", "cry", "emotional",
    "trauma", "help", "suicide", "hurt", "alone", "hopeless", "abuse",
)

RATIONALES: dict[ProfessionalCategory, str] = {
    ProfessionalCategory.COUNSELLOR: (
        "Based on your emotional distress, we recommend speaking with a counsellor first."
    ),
    ProfessionalCategory.LEGAL: (
        "It seems you have legal concerns. We recommend speaking with a legal advisor."
    ),
}


@dataclass(frozen=True)
class KeywordSets:
    """Category → terms mapping used by :func:`classify`."""

    legal: frozenset[str]
    counsellor: frozenset[str]

    @classmethod
    def build(
        cls,
        legal: list[str] | tuple[str, ...] | None = None,
        counsellor: list[str] | tuple[str, ...] | None = None,
    ) -> KeywordSets:
        """Build keyword sets, falling back to the defaults for empty input."""
        return cls(
            legal=_normalize_terms(legal or LEGAL_KEYWORDS),
            counsellor=_normalize_terms(counsellor or COUNSELLOR_KEYWORDS),
        )


def _normalize_terms(terms) -> frozenset[str]:
    return frozenset(t.strip().lower() for t in terms if t and t.strip())


DEFAULT_KEYWORDS = KeywordSets.build()


def _matches(lowered_text: str, terms: frozenset[str]) -> list[str]:
    """Distinct terms that occur as substrings, sorted for stable output."""
    return sorted(t for t in terms if t in lowered_text)


def classify(text: str | None, keywords: KeywordSets = DEFAULT_KEYWORDS) -> ClassificationResult:
    """Pure function: recommend a service category for *text*.

    One point per distinct keyword found (not per occurrence). Legal wins
    only on a strict majority; ties, including 0/0, go to counselling.

    Raises:
        InvalidInput: if the text is empty after trimming.
    """
    if text is None or not text.strip():
        raise InvalidInput("Message is required")

    lowered = text.lower()
    legal_hits = _matches(lowered, keywords.legal)
    counsellor_hits = _matches(lowered, keywords.counsellor)

    if len(legal_hits) > len(counsellor_hits):
        recommended = ProfessionalCategory.LEGAL
    else:
        recommended = ProfessionalCategory.COUNSELLOR

    return ClassificationResult(
        recommended_category=recommended,
        rationale=RATIONALES[recommended],
        score_breakdown={
            ProfessionalCategory.LEGAL.value: len(legal_hits),
            ProfessionalCategory.COUNSELLOR.value: len(counsellor_hits),
        },
        matched_keywords={
            ProfessionalCategory.LEGAL.value: legal_hits,
            ProfessionalCategory.COUNSELLOR.value: counsellor_hits,
        },
    )
