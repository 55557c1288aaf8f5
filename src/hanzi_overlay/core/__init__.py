"""Core domain services for matching, disambiguating and annotating words."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "Annotation",
    "AnnotationState",
    "ContextExtractor",
    "DictionaryStore",
    "Entry",
    "ReplacementSelector",
    "Token",
    "Tokenizer",
    "TranslationScorer",
    "build_dictionary",
    "search_entries",
]


def __getattr__(name: str) -> Any:  # pragma: no cover - thin lazy import layer
    if name in __all__:
        module_map = {
            "Annotation": "models",
            "AnnotationState": "models",
            "Entry": "models",
            "Token": "models",
            "ContextExtractor": "context",
            "DictionaryStore": "dictionary",
            "build_dictionary": "dictionary",
            "ReplacementSelector": "selection",
            "Tokenizer": "tokenization",
            "TranslationScorer": "scoring",
            "search_entries": "search",
        }
        module_name = module_map[name]
        module = import_module(f"{__name__}.{module_name}")
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:  # pragma: no cover - aids interactive use
    return sorted(__all__ + list(globals().keys()))
