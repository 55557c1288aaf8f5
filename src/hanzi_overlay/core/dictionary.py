"""Dictionary construction from ordered, overridable word lists."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence

from ..errors import ListResolutionError
from .models import Entry

logger = logging.getLogger(__name__)

_SCRIPT_KEYS = ("hanzi", "scriptForm", "script_form")
_PHONETIC_KEYS = ("pinyin", "phoneticForm", "phonetic_form")


class ListSource(Protocol):
    def resolve(self, list_id: str) -> Any:
        """Return the decoded list content or raise :class:`ListResolutionError`."""


def normalize_key(text: str) -> str:
    return text.strip().lower()


def _first_value(record: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def parse_records(raw: Any, list_id: str) -> List[Entry]:
    """Turn decoded list content into entries, skipping unusable records."""

    if not isinstance(raw, list):
        raise ListResolutionError(list_id, f"expected a JSON array, got {type(raw).__name__}")
    entries: List[Entry] = []
    for index, record in enumerate(raw):
        if not isinstance(record, Mapping):
            logger.debug("Skipping non-object record %d in %s", index, list_id)
            continue
        script = _first_value(record, _SCRIPT_KEYS)
        translations = record.get("translations") or []
        if isinstance(translations, str):
            translations = [translations]
        elif not isinstance(translations, (list, tuple)):
            logger.debug("Skipping record %d in %s with malformed translations", index, list_id)
            continue
        cleaned = tuple(
            t.strip() for t in translations if isinstance(t, str) and t.strip()
        )
        if script is None or not cleaned:
            logger.debug("Skipping incomplete record %d in %s", index, list_id)
            continue
        entries.append(
            Entry(
                script_form=script,
                phonetic_form=_first_value(record, _PHONETIC_KEYS) or "",
                translations=cleaned,
                source_list_id=list_id,
                entry_id=record.get("id"),
            )
        )
    return entries


class DictionaryStore:
    """Lookup from normalized English translation to :class:`Entry`.

    Lists are applied in the order they are added; a later list overrides an
    earlier one for every key they share.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Entry] = {}
        self.loaded_lists: List[str] = []
        self.failed_lists: List[str] = []

    def add_entries(self, entries: Iterable[Entry]) -> int:
        count = 0
        for entry in entries:
            for translation in entry.translations:
                key = normalize_key(translation)
                if key:
                    self._entries[key] = entry
            count += 1
        return count

    def add_list(self, raw: Any, list_id: str) -> int:
        count = self.add_entries(parse_records(raw, list_id))
        self.loaded_lists.append(list_id)
        return count

    def lookup(self, word: str) -> Optional[Entry]:
        if not word:
            return None
        return self._entries.get(normalize_key(word))

    def keys(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.lookup(word) is not None

    def __len__(self) -> int:
        return len(self._entries)


def build_dictionary(
    list_ids: Sequence[str],
    source: ListSource,
    personal_words: Optional[Sequence[Mapping[str, Any]]] = None,
    personal_list_id: str = "personal",
) -> DictionaryStore:
    """Build a store from ``list_ids`` followed by the personal override list.

    ``list_ids`` must already be in load order. Lists that fail to resolve or
    parse are logged and left out.
    """

    store = DictionaryStore()
    for list_id in list_ids:
        try:
            count = store.add_list(source.resolve(list_id), list_id)
        except ListResolutionError as exc:
            logger.warning("%s", exc)
            store.failed_lists.append(list_id)
            continue
        logger.info("Loaded %d words from %s", count, list_id)
    if personal_words:
        try:
            count = store.add_list(list(personal_words), personal_list_id)
        except ListResolutionError as exc:
            logger.warning("%s", exc)
            store.failed_lists.append(personal_list_id)
        else:
            logger.info("Loaded %d personal words", count)
    logger.info("Total dictionary size: %d entries", len(store))
    return store


__all__ = ["DictionaryStore", "ListSource", "build_dictionary", "normalize_key", "parse_records"]
