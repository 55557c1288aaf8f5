"""Qt based user-interface components."""

from .reader import ReaderWindow

__all__ = ["ReaderWindow"]
