"""Boundary based tokenisation of page text."""

from __future__ import annotations

import re
from typing import Any, Iterator, List, Protocol, Sequence

from .models import Token

_BOUNDARY = re.compile(r"\b")


class _Lookup(Protocol):
    def __contains__(self, word: object) -> bool: ...


class Tokenizer:
    """Split text on word boundaries without losing any characters.

    Punctuation and whitespace runs become tokens of their own, so joining the
    token texts always reproduces the input.
    """

    def tokenize(self, text: str, origin: Any = None) -> List[Token]:
        if not text:
            return []
        fragments = [part for part in _BOUNDARY.split(text) if part]
        return [Token(text=part, position=index, origin=origin) for index, part in enumerate(fragments)]

    @staticmethod
    def is_candidate(token: Token, dictionary: _Lookup) -> bool:
        return token.text.lower() in dictionary

    def candidates(self, tokens: Sequence[Token], dictionary: _Lookup) -> Iterator[Token]:
        for token in tokens:
            if self.is_candidate(token, dictionary):
                yield token


__all__ = ["Tokenizer"]
