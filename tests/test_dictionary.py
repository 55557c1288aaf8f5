from __future__ import annotations

from typing import Any, Dict, List

import pytest

from hanzi_overlay.core.dictionary import DictionaryStore, build_dictionary, parse_records
from hanzi_overlay.core.search import search_entries
from hanzi_overlay.errors import ListResolutionError


class _MappingSource:
    def __init__(self, lists: Dict[str, Any]) -> None:
        self.lists = lists
        self.calls: List[str] = []

    def resolve(self, list_id: str) -> Any:
        self.calls.append(list_id)
        value = self.lists.get(list_id)
        if value is None:
            raise ListResolutionError(list_id, "missing")
        return value


BASE = [
    {"id": 1, "hanzi": "一", "pinyin": "yī", "translations": ["one"]},
    {"id": 2, "hanzi": "家", "pinyin": "jiā", "translations": ["home", "House"]},
]
PERSONAL = [{"id": 9, "hanzi": "壹", "pinyin": "yī", "translations": ["one"]}]


def test_personal_list_overrides_base_list() -> None:
    source = _MappingSource({"hsk1": BASE})

    store = build_dictionary(["hsk1"], source, personal_words=PERSONAL)

    entry = store.lookup("one")
    assert entry is not None
    assert entry.script_form == "壹"
    assert entry.source_list_id == "personal"
    assert store.lookup("home").script_form == "家"


def test_later_base_list_wins_on_shared_key() -> None:
    source = _MappingSource(
        {
            "hsk1": [{"hanzi": "大", "pinyin": "dà", "translations": ["big"]}],
            "hsk2": [{"hanzi": "巨", "pinyin": "jù", "translations": ["Big "]}],
        }
    )

    store = build_dictionary(["hsk1", "hsk2"], source)

    assert store.lookup("big").script_form == "巨"
    assert len(store) == 1


def test_lookup_is_case_and_whitespace_insensitive() -> None:
    store = DictionaryStore()
    store.add_list(BASE, "hsk1")

    for word in ("house", "House", "HOUSE", "house "):
        assert store.lookup(word) is not None
        assert word in store
    assert store.lookup("houses") is None
    assert store.lookup("") is None


def test_every_translation_becomes_a_key() -> None:
    store = DictionaryStore()
    store.add_list(BASE, "hsk1")

    assert sorted(store.keys()) == ["home", "house", "one"]
    assert store.lookup("house").translations == ("home", "House")


def test_failed_list_is_skipped() -> None:
    source = _MappingSource({"hsk1": BASE, "hsk3": [{"hanzi": "猫", "pinyin": "māo", "translations": ["cat"]}]})

    store = build_dictionary(["hsk1", "hsk2", "hsk3"], source)

    assert source.calls == ["hsk1", "hsk2", "hsk3"]
    assert store.failed_lists == ["hsk2"]
    assert store.loaded_lists == ["hsk1", "hsk3"]
    assert "one" in store
    assert "cat" in store


def test_non_array_payload_counts_as_failure() -> None:
    source = _MappingSource({"hsk1": {"words": BASE}})

    store = build_dictionary(["hsk1"], source)

    assert len(store) == 0
    assert store.failed_lists == ["hsk1"]


def test_incomplete_records_are_skipped() -> None:
    raw = [
        {"hanzi": "空", "pinyin": "kōng", "translations": []},
        {"hanzi": "无", "pinyin": "wú"},
        {"pinyin": "shū", "translations": ["book"]},
        {"hanzi": "书", "pinyin": "shū", "translations": ["", "  ", "book"]},
        "not a record",
        {"scriptForm": "水", "phoneticForm": "shuǐ", "translations": ["water"]},
    ]

    entries = parse_records(raw, "custom")

    assert [entry.script_form for entry in entries] == ["书", "水"]
    assert entries[0].translations == ("book",)
    assert entries[1].phonetic_form == "shuǐ"


def test_records_with_malformed_translations_are_skipped() -> None:
    raw = [
        {"hanzi": "五", "translations": 5},
        {"hanzi": "六", "translations": {"en": "six"}},
        {"hanzi": "七", "translations": None},
        {"hanzi": "八", "translations": "eight"},
    ]

    entries = parse_records(raw, "custom")

    assert [entry.script_form for entry in entries] == ["八"]


def test_malformed_translations_do_not_abort_the_build() -> None:
    source = _MappingSource({"hsk1": BASE, "hsk2": [{"hanzi": "五", "translations": 5}]})

    store = build_dictionary(["hsk1", "hsk2"], source)

    assert store.loaded_lists == ["hsk1", "hsk2"]
    assert store.lookup("one").script_form == "一"
    assert "house" in store


def test_malformed_personal_words_keep_base_lists() -> None:
    source = _MappingSource({"hsk1": BASE})

    store = build_dictionary(["hsk1"], source, personal_words=[{"hanzi": "五", "translations": 5}])

    assert store.lookup("one").script_form == "一"
    assert store.failed_lists == []


def test_parse_records_rejects_non_list() -> None:
    with pytest.raises(ListResolutionError):
        parse_records({"hanzi": "一"}, "broken")


def test_search_matches_script_phonetic_and_translations() -> None:
    entries = parse_records(
        BASE + [{"id": 3, "hanzi": "好", "pinyin": "Hǎo", "translations": ["good", "nice"]}],
        "hsk1",
    )

    assert [e.script_form for e in search_entries(entries, "家")] == ["家"]
    assert [e.script_form for e in search_entries(entries, "hǎo")] == ["好"]
    assert [e.script_form for e in search_entries(entries, "NIC")] == ["好"]
    assert search_entries(entries, "   ") == []
    assert len(search_entries(entries * 10, "o", limit=10)) == 10
