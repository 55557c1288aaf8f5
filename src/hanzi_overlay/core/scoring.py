"""Context based choice between the meanings of a dictionary entry."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import FrozenSet, List, Sequence, Tuple

from .models import Entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DomainCategory:
    """Keywords that signal a topic in the context, and words belonging to it."""

    name: str
    context_keywords: FrozenSet[str]
    translation_words: FrozenSet[str]

    def matches_context(self, context: str) -> bool:
        return any(re.search(rf"\b{re.escape(word)}\b", context) for word in self.context_keywords)


DOMAIN_CATEGORIES: Tuple[DomainCategory, ...] = (
    DomainCategory("time", frozenset({"time"}), frozenset({"time", "hour", "moment", "period"})),
    DomainCategory("money", frozenset({"money"}), frozenset({"money", "cost", "price", "pay"})),
    DomainCategory("person", frozenset({"person"}), frozenset({"person", "people", "man", "woman"})),
    DomainCategory(
        "food",
        frozenset({"eat", "food", "cook", "meal", "restaurant"}),
        frozenset({"eat", "food", "dish", "meal", "cook"}),
    ),
    DomainCategory(
        "work",
        frozenset({"work", "job", "office", "business"}),
        frozenset({"work", "job", "business", "office"}),
    ),
    DomainCategory(
        "travel",
        frozenset({"go", "come", "travel", "move"}),
        frozenset({"go", "come", "travel", "move", "arrive"}),
    ),
)

WORD_MATCH_SCORE = 3.0
CATEGORY_SCORE = 2.0
SHORT_TRANSLATION_SCORE = 1.0
SINGLE_WORD_SCORE = 0.5
SHORT_TRANSLATION_LENGTH = 10
MIN_MARGIN = 1.0


class TranslationScorer:
    """Pick the translation of an entry that best fits a context string."""

    def __init__(self, categories: Sequence[DomainCategory] = DOMAIN_CATEGORIES) -> None:
        self.categories = tuple(categories)

    def score(self, translations: Sequence[str], context: str) -> List[Tuple[str, float]]:
        """Return ``(translation, score)`` pairs, best first."""

        context_words = set(context.split())
        active = [category for category in self.categories if category.matches_context(context)]
        scored: List[Tuple[str, float]] = []
        for translation in translations:
            score = 0.0
            words = translation.lower().split()
            for word in words:
                if word in context_words:
                    score += WORD_MATCH_SCORE
                for category in active:
                    if word in category.translation_words:
                        score += CATEGORY_SCORE
            if len(translation) < SHORT_TRANSLATION_LENGTH:
                score += SHORT_TRANSLATION_SCORE
            if len(words) == 1:
                score += SINGLE_WORD_SCORE
            scored.append((translation, score))
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored

    def select(self, entry: Entry, context: str) -> str:
        if len(entry.translations) <= 1:
            return entry.primary_meaning
        ranked = self.score(entry.translations, context or "")
        best, best_score = ranked[0]
        margin = best_score - ranked[1][1]
        if best_score == 0 or margin < MIN_MARGIN:
            return entry.primary_meaning
        logger.debug("Context selected %r for %s (score %.1f)", best, entry.script_form, best_score)
        return best


__all__ = ["DOMAIN_CATEGORIES", "DomainCategory", "TranslationScorer"]
