"""Command line interface: annotate pages and manage word lists."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import PERSONAL_LIST_ID, AppConfig
from .core.models import Entry
from .core.search import search_entries
from .errors import HanziOverlayError
from .services.lists import ListResolver, load_all_entries
from .services.page import load_page, parse_html
from .services.pipeline import EngineHost
from .services.settings import SettingsStore, open_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="hanzi-overlay",
        description="Replace some English words in a web page with Chinese glosses.",
    )
    ap.add_argument("--settings", type=Path, default=None, help="Settings INI file (default: the platform settings store).")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = ap.add_subparsers(dest="command", required=True)

    annotate = sub.add_parser("annotate", help="Annotate an HTML file or URL.")
    annotate.add_argument("input", help="Path or http(s) URL of the page.")
    annotate.add_argument("-o", "--output", type=Path, default=None, help="Write HTML here instead of stdout.")
    annotate.add_argument("--host", default=None, help="Host name to check against the blocklist.")
    annotate.add_argument("--seed", type=int, default=None, help="Seed for reproducible selection.")
    annotate.add_argument("--max", dest="max_replacements", type=int, default=None, help="Annotation budget.")
    annotate.add_argument("--probability", type=float, default=None, help="Chance to annotate each match.")
    annotate.add_argument("--no-context", action="store_true", help="Always use the primary meaning.")

    search = sub.add_parser("search", help="Search all word lists.")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=10)

    add = sub.add_parser("add", help="Add a word to the personal list by id.")
    add.add_argument("word_id")

    remove = sub.add_parser("remove", help="Remove a word from the personal list by id.")
    remove.add_argument("word_id")

    sub.add_parser("clear-personal", help="Empty the personal list.")

    select = sub.add_parser("select", help="Choose which lists are used.")
    select.add_argument("lists", nargs="+")

    sub.add_parser("lists", help="Show available and selected lists.")
    return ap


def _record(entry: Entry) -> Dict[str, Any]:
    return {
        "id": entry.entry_id,
        "hanzi": entry.script_form,
        "pinyin": entry.phonetic_form,
        "translations": list(entry.translations),
    }


def _format_entry(entry: Entry) -> str:
    return f"{entry.entry_id}\t{entry.script_form} ({entry.phonetic_form})\t{entry.primary_meaning}"


def _run_annotate(args: argparse.Namespace, config: AppConfig, settings: SettingsStore) -> int:
    engine_config = config.engine
    if args.max_replacements is not None:
        engine_config = replace(engine_config, max_replacements=args.max_replacements)
    if args.probability is not None:
        engine_config = replace(engine_config, replacement_probability=args.probability)
    if args.no_context:
        engine_config = replace(engine_config, contextual_scoring=False)
    config = replace(config, engine=engine_config)

    page = load_page(args.input, timeout=config.lists.http_timeout)
    host = EngineHost(config, settings, rng=random.Random(args.seed))
    document = parse_html(page.html)
    if host.start(args.host or page.hostname):
        annotations = host.annotate(document)
        logger.info("Annotated %d words", len(annotations))
    host.close()

    html = str(document)
    if args.output is None:
        sys.stdout.write(html)
    else:
        args.output.write_text(html, encoding="utf-8")
    return 0


def _find_entry(entries: List[Entry], word_id: str) -> Optional[Entry]:
    for entry in entries:
        if str(entry.entry_id) == word_id:
            return entry
    return None


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = AppConfig(settings_path=args.settings)
    settings = open_settings(config.settings_path, config.lists.default_lists)
    resolver = ListResolver.from_config(config.lists)

    try:
        if args.command == "annotate":
            return _run_annotate(args, config, settings)
        if args.command == "search":
            for entry in search_entries(load_all_entries(resolver), args.query, limit=args.limit):
                print(_format_entry(entry))
            return 0
        if args.command == "add":
            entry = _find_entry(load_all_entries(resolver), args.word_id)
            if entry is None:
                print(f"No word with id {args.word_id}", file=sys.stderr)
                return 1
            if not settings.add_personal_word(_record(entry)):
                print(f"{entry.script_form} is already in the personal list")
            return 0
        if args.command == "remove":
            for word in settings.personal_words:
                if str(word.get("id")) == args.word_id:
                    settings.remove_personal_word(word.get("id"))
                    return 0
            print(f"No personal word with id {args.word_id}", file=sys.stderr)
            return 1
        if args.command == "clear-personal":
            settings.clear_personal_words()
            return 0
        if args.command == "select":
            known = set(resolver.sources) | {PERSONAL_LIST_ID}
            unknown = [item for item in args.lists if item not in known]
            if unknown:
                print(f"Unknown lists: {', '.join(unknown)}", file=sys.stderr)
                return 1
            settings.update(selected_lists=args.lists)
            return 0
        if args.command == "lists":
            selected = set(settings.selected_lists)
            for list_id in [*resolver.sources, PERSONAL_LIST_ID]:
                marker = "*" if list_id in selected else " "
                print(f"{marker} {list_id}")
            print(f"personal words: {len(settings.personal_words)}")
            return 0
    except HanziOverlayError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation only
    raise SystemExit(main())
