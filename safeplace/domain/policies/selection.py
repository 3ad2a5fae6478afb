"""SelectionPolicy — pick one professional from an eligible candidate list."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from safeplace.domain.entities.professional import Professional


class SelectionStrategy(ABC):
    @abstractmethod
    def select_one(self, candidates: list[Professional]) -> Professional:
        """Return one of *candidates*.

        Raises:
            ValueError: if candidates list is empty.
        """
        ...


class UniformRandomSelection(SelectionStrategy):
    """Uniform random pick. Pass a seeded ``random.Random`` for reproducibility."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def select_one(self, candidates: list[Professional]) -> Professional:
        if not candidates:
            raise ValueError("Cannot pick from an empty candidate list")
        return self._rng.choice(candidates)
