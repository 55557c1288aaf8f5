"""Budgeted, probabilistic choice of which occurrences to annotate."""

from __future__ import annotations

import random
from typing import Optional


class ReplacementSelector:
    """Accept occurrences at random until the budget is spent.

    Each call to :meth:`consider` is an independent draw. Accepted draws count
    against ``max_replacements``; once the budget is reached every further
    draw is refused.
    """

    def __init__(
        self,
        max_replacements: int = 50,
        probability: float = 0.25,
        rng: Optional[random.Random] = None,
    ) -> None:
        if max_replacements < 0:
            raise ValueError("max_replacements must not be negative")
        if not 0.0 <= probability <= 1.0:
            raise ValueError("probability must be between 0 and 1")
        self.max_replacements = max_replacements
        self.probability = probability
        self._rng = rng or random.Random()
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    @property
    def remaining(self) -> int:
        return self.max_replacements - self._count

    @property
    def exhausted(self) -> bool:
        return self._count >= self.max_replacements

    def consider(self) -> bool:
        if self.exhausted:
            return False
        if self._rng.random() >= self.probability:
            return False
        self._count += 1
        return True


__all__ = ["ReplacementSelector"]
