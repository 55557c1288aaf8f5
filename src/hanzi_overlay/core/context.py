"""Sentence level context gathering used for disambiguation."""

from __future__ import annotations

import re
from typing import List

_SENTENCE_END = re.compile(r"[.!?]+")


class ContextExtractor:
    """Collect the sentences around each occurrence of a word.

    For every sentence that contains the word (whole word, any case) the
    previous, the matching and the following sentence are collected. Only the
    first ``max_sentences`` collected sentences are kept.
    """

    def __init__(self, max_sentences: int = 3) -> None:
        self.max_sentences = max_sentences

    @staticmethod
    def split_sentences(text: str) -> List[str]:
        sentences = (part.strip() for part in _SENTENCE_END.split(text))
        return [sentence for sentence in sentences if sentence]

    def extract(self, text: str | None, word: str) -> str:
        if not text or not word or not word.strip():
            return ""
        pattern = re.compile(rf"\b{re.escape(word.strip())}\b", re.IGNORECASE)
        sentences = self.split_sentences(text)
        collected: List[str] = []
        for index, sentence in enumerate(sentences):
            if not pattern.search(sentence):
                continue
            if index > 0:
                collected.append(sentences[index - 1])
            collected.append(sentence)
            if index < len(sentences) - 1:
                collected.append(sentences[index + 1])
        return " ".join(collected[: self.max_sentences]).lower()


__all__ = ["ContextExtractor"]
