"""Exception types raised by the overlay engine and its collaborators."""

from __future__ import annotations


class HanziOverlayError(Exception):
    """Base class for all errors raised by this package."""


class ListResolutionError(HanziOverlayError):
    """A word-list could not be located, fetched or parsed."""

    def __init__(self, list_id: str, reason: str) -> None:
        super().__init__(f"cannot load word list {list_id!r}: {reason}")
        self.list_id = list_id
        self.reason = reason


__all__ = ["HanziOverlayError", "ListResolutionError"]
