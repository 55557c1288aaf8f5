"""Application level configuration objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

PERSONAL_LIST_ID = "personal"
"""Reserved list identifier that selects the user's personal word list."""


def _default_sources() -> Dict[str, str]:
    # Insertion order is the load order: ascending HSK level.
    return {f"hsk{level}": f"hsk/hsk-level-{level}.json" for level in range(1, 7)}


@dataclass(slots=True)
class EngineConfig:
    """Parameters of the annotation engine."""

    max_replacements: int = 50
    """Upper bound on annotations created per dictionary load."""

    replacement_probability: float = 0.25
    """Independent chance that a matching occurrence is annotated."""

    contextual_scoring: bool = True
    """Pick among multiple meanings using the surrounding sentences."""

    blocked_domains: Tuple[str, ...] = ("google", "bing.com", "duckduckgo.com", "yahoo.com")
    """Host names on which the engine never runs."""


@dataclass(slots=True)
class ListConfig:
    """Where word lists come from and which ones are used by default."""

    sources: Dict[str, str] = field(default_factory=_default_sources)
    """Ordered mapping of list id to a package data path, file path or URL."""

    default_lists: List[str] = field(default_factory=lambda: ["hsk1"])
    data_dir: Optional[Path] = None
    """Directory relative sources are resolved against (package data if unset)."""

    http_timeout: float = 10.0


@dataclass(slots=True)
class ReaderConfig:
    """Visual configuration for the reader window."""

    font_family: str = "Noto Sans CJK SC"
    font_size: int = 15
    script_color: str = "#b22222"
    phonetic_color: str = "#666666"


@dataclass(slots=True)
class AppConfig:
    """Top level configuration container."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    lists: ListConfig = field(default_factory=ListConfig)
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    settings_path: Optional[Path] = None
    """INI file for user settings; ``None`` uses the platform's native QSettings store."""


__all__ = ["AppConfig", "EngineConfig", "ListConfig", "ReaderConfig", "PERSONAL_LIST_ID"]
