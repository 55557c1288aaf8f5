"""Substring search over dictionary entries, used to build the personal list."""

from __future__ import annotations

from typing import Iterable, List

from .models import Entry


def matches(entry: Entry, query: str) -> bool:
    query = query.lower()
    if query in entry.script_form:
        return True
    if query in entry.phonetic_form.lower():
        return True
    return any(query in translation.lower() for translation in entry.translations)


def search_entries(entries: Iterable[Entry], query: str, limit: int = 10) -> List[Entry]:
    query = query.strip()
    if not query:
        return []
    results: List[Entry] = []
    for entry in entries:
        if matches(entry, query):
            results.append(entry)
            if len(results) >= limit:
                break
    return results


__all__ = ["search_entries"]
