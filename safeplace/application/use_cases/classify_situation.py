"""ClassifySituationUseCase — recommend a service category for a victim's message."""

from __future__ import annotations

import logging

from safeplace.domain.entities.classification import ClassificationResult
from safeplace.domain.policies.classification import DEFAULT_KEYWORDS, KeywordSets, classify

logger = logging.getLogger(__name__)


class ClassifySituationUseCase:
    """Thin wrapper over the classification policy with configured keywords."""

    def __init__(self, keywords: KeywordSets = DEFAULT_KEYWORDS):
        self._keywords = keywords

    def execute(self, text: str | None) -> ClassificationResult:
        result = classify(text, self._keywords)
        # Message text is sensitive; log only the outcome.
        logger.info(
            "Classified situation: category=%s, scores=%s",
            result.recommended_category.value, result.score_breakdown,
        )
        return result
