from __future__ import annotations

from typing import FrozenSet, List

from PySide6 import QtCore

from hanzi_overlay.services.settings import (
    PERSONAL_WORDS,
    SELECTED_LISTS,
    SettingsStore,
    open_settings,
)

WORD = {"id": 7, "hanzi": "吃", "pinyin": "chī", "translations": ["eat"]}


def _ini(path) -> QtCore.QSettings:
    return QtCore.QSettings(str(path), QtCore.QSettings.Format.IniFormat)


def test_defaults_when_nothing_stored(tmp_path) -> None:
    store = SettingsStore.from_path(tmp_path / "settings.ini")

    assert store.selected_lists == ["hsk1"]
    assert store.personal_words == []


def test_values_persist_between_instances(tmp_path) -> None:
    path = tmp_path / "nested" / "settings.ini"
    SettingsStore.from_path(path).update(selected_lists=["hsk2", "personal"], personal_words=[WORD])

    reloaded = SettingsStore.from_path(path)

    assert reloaded.selected_lists == ["hsk2", "personal"]
    assert reloaded.personal_words == [WORD]
    assert path.exists()
    assert _ini(path).contains(SELECTED_LISTS)


def test_open_settings_uses_the_given_file(tmp_path) -> None:
    path = tmp_path / "settings.ini"

    store = open_settings(path, default_lists=["hsk2"])

    assert store.qt_settings is not None
    assert store.selected_lists == ["hsk2"]

    store.update(selected_lists=["hsk1"])

    assert path.exists()


def test_listeners_receive_changed_keys() -> None:
    store = SettingsStore()
    seen: List[FrozenSet[str]] = []
    store.subscribe(seen.append)

    store.update(selected_lists=["hsk3"])
    store.update(selected_lists=["hsk3"])
    store.update(selected_lists=["hsk3"], personal_words=[WORD])

    assert seen == [frozenset({SELECTED_LISTS}), frozenset({PERSONAL_WORDS})]

    store.unsubscribe(seen.append)
    store.update(selected_lists=["hsk4"])
    assert len(seen) == 2


def test_listeners_fire_for_file_backed_store(tmp_path) -> None:
    store = SettingsStore.from_path(tmp_path / "settings.ini")
    seen: List[FrozenSet[str]] = []
    store.subscribe(seen.append)

    store.update(selected_lists=["hsk2"])
    store.update(selected_lists=["hsk2"])

    assert seen == [frozenset({SELECTED_LISTS})]


def test_personal_words_are_not_duplicated() -> None:
    store = SettingsStore()

    assert store.add_personal_word(WORD)
    assert not store.add_personal_word(dict(WORD))
    assert [word["id"] for word in store.personal_words] == [7]


def test_remove_and_clear_personal_words() -> None:
    store = SettingsStore()
    store.add_personal_word(WORD)
    store.add_personal_word({**WORD, "id": 8})

    assert store.remove_personal_word(7)
    assert not store.remove_personal_word(7)
    assert [word["id"] for word in store.personal_words] == [8]

    store.clear_personal_words()
    assert store.personal_words == []


def test_personal_words_are_copies() -> None:
    store = SettingsStore()
    store.add_personal_word(WORD)

    store.personal_words[0]["hanzi"] = "changed"

    assert store.personal_words[0]["hanzi"] == "吃"


def test_unreadable_value_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "settings.ini"
    raw = _ini(path)
    raw.setValue(SELECTED_LISTS, "[1, 2")
    raw.sync()

    assert SettingsStore.from_path(path).selected_lists == ["hsk1"]


def test_plain_string_selection_is_not_split_into_characters(tmp_path) -> None:
    path = tmp_path / "settings.ini"
    raw = _ini(path)
    raw.setValue(SELECTED_LISTS, '"hsk1"')
    raw.sync()

    assert SettingsStore.from_path(path, default_lists=["hsk2"]).selected_lists == ["hsk2"]


def test_non_list_selection_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "settings.ini"
    raw = _ini(path)
    raw.setValue(SELECTED_LISTS, '{"hsk1": true}')
    raw.sync()

    assert SettingsStore.from_path(path).selected_lists == ["hsk1"]


def test_update_treats_a_string_as_one_list_id() -> None:
    store = SettingsStore()

    store.update(selected_lists="hsk3")

    assert store.selected_lists == ["hsk3"]
