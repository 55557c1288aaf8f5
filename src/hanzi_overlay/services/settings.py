"""Persisted user settings: selected word lists and the personal word list."""

from __future__ import annotations

import json
import logging
import threading
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence

from PySide6 import QtCore

logger = logging.getLogger(__name__)

SELECTED_LISTS = "selected_lists"
PERSONAL_WORDS = "personal_words"

ORGANIZATION = "HanziOverlay"
APPLICATION = "hanzi-overlay"

SettingsListener = Callable[[FrozenSet[str]], None]


class SettingsStore:
    """Key store on top of :class:`QtCore.QSettings` that notifies listeners on change.

    Values are kept as JSON text so lists of records survive every QSettings
    backend unchanged. Without a ``QSettings`` object everything stays in
    memory.
    """

    def __init__(
        self,
        qt_settings: Optional[QtCore.QSettings] = None,
        default_lists: Sequence[str] = ("hsk1",),
    ) -> None:
        self._qt_settings = qt_settings
        self._memory: Dict[str, Any] = {}
        self._default_lists = list(default_lists)
        self._listeners: List[SettingsListener] = []
        self._lock = threading.RLock()

    @classmethod
    def from_path(cls, path: Path, default_lists: Sequence[str] = ("hsk1",)) -> "SettingsStore":
        """Settings stored in an INI file at ``path``."""

        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(QtCore.QSettings(str(path), QtCore.QSettings.Format.IniFormat), default_lists)

    @classmethod
    def native(cls, default_lists: Sequence[str] = ("hsk1",)) -> "SettingsStore":
        """Settings in the platform's native location for this application."""

        return cls(QtCore.QSettings(ORGANIZATION, APPLICATION), default_lists)

    @property
    def qt_settings(self) -> Optional[QtCore.QSettings]:
        return self._qt_settings

    def _read(self, key: str) -> Any:
        if self._qt_settings is None:
            with self._lock:
                return deepcopy(self._memory.get(key))
        with self._lock:
            raw = self._qt_settings.value(key)
        if raw is None:
            return None
        if not isinstance(raw, str):
            logger.warning("Ignoring setting %r of unexpected type %s", key, type(raw).__name__)
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unreadable setting %r", key)
            return None

    def _write(self, key: str, value: Any) -> None:
        with self._lock:
            if self._qt_settings is None:
                self._memory[key] = deepcopy(value)
                return
            self._qt_settings.setValue(key, json.dumps(value, ensure_ascii=False))
            self._qt_settings.sync()

    @property
    def selected_lists(self) -> List[str]:
        value = self._read(SELECTED_LISTS)
        if not isinstance(value, list) or not value:
            return list(self._default_lists)
        return [str(item) for item in value]

    @property
    def personal_words(self) -> List[Dict[str, Any]]:
        value = self._read(PERSONAL_WORDS)
        if not isinstance(value, list):
            return []
        return [record for record in value if isinstance(record, dict)]

    def subscribe(self, listener: SettingsListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SettingsListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def update(
        self,
        selected_lists: Optional[Sequence[str]] = None,
        personal_words: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> FrozenSet[str]:
        """Store new values and notify listeners of what changed."""

        if isinstance(selected_lists, str):
            selected_lists = [selected_lists]
        changed = set()
        with self._lock:
            if selected_lists is not None:
                value = [str(item) for item in selected_lists]
                if value != self._read(SELECTED_LISTS):
                    self._write(SELECTED_LISTS, value)
                    changed.add(SELECTED_LISTS)
            if personal_words is not None:
                records = [dict(record) for record in personal_words]
                if records != self._read(PERSONAL_WORDS):
                    self._write(PERSONAL_WORDS, records)
                    changed.add(PERSONAL_WORDS)
        if not changed:
            return frozenset()
        keys = frozenset(changed)
        for listener in list(self._listeners):
            listener(keys)
        return keys

    def add_personal_word(self, record: Mapping[str, Any]) -> bool:
        words = self.personal_words
        if any(word.get("id") == record.get("id") for word in words):
            return False
        words.append(dict(record))
        self.update(personal_words=words)
        return True

    def remove_personal_word(self, word_id: Any) -> bool:
        words = self.personal_words
        kept = [word for word in words if word.get("id") != word_id]
        if len(kept) == len(words):
            return False
        self.update(personal_words=kept)
        return True

    def clear_personal_words(self) -> None:
        self.update(personal_words=[])


def open_settings(path: Optional[Path], default_lists: Sequence[str] = ("hsk1",)) -> SettingsStore:
    if path is None:
        return SettingsStore.native(default_lists)
    return SettingsStore.from_path(path, default_lists)


__all__ = ["PERSONAL_WORDS", "SELECTED_LISTS", "SettingsStore", "open_settings"]
