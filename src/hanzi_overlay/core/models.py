"""Data models shared across the application."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Entry:
    """A dictionary record: one Chinese word and its English translations."""

    script_form: str
    phonetic_form: str
    translations: Tuple[str, ...]
    source_list_id: str
    entry_id: Optional[Any] = None

    @property
    def primary_meaning(self) -> str:
        return self.translations[0]


@dataclass(slots=True)
class Token:
    """A contiguous fragment of a text node."""

    text: str
    position: int
    origin: Any = None
    """The text node the fragment was cut from, if any."""


class AnnotationState(str, enum.Enum):
    REVEALED = "revealed"
    ORIGINAL = "original"


@dataclass(frozen=True, slots=True)
class Annotation:
    """The rendered, toggleable gloss for one accepted token occurrence."""

    original_text: str
    script_form: str
    phonetic_form: str
    selected_meaning: str
    state: AnnotationState = AnnotationState.REVEALED

    def toggled(self) -> "Annotation":
        if self.state is AnnotationState.REVEALED:
            return replace(self, state=AnnotationState.ORIGINAL)
        return replace(self, state=AnnotationState.REVEALED)

    @property
    def hover_text(self) -> str:
        return self.selected_meaning


__all__ = ["Annotation", "AnnotationState", "Entry", "Token"]
