"""High level orchestration of the dictionary -> selection -> rendering pipeline."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence

from bs4 import BeautifulSoup, NavigableString, Tag

from ..config import PERSONAL_LIST_ID, AppConfig, EngineConfig
from ..core.context import ContextExtractor
from ..core.dictionary import DictionaryStore, build_dictionary
from ..core.models import Annotation, Entry
from ..core.scoring import TranslationScorer
from ..core.selection import ReplacementSelector
from ..core.tokenization import Tokenizer
from .lists import ListResolver
from .page import Renderer, context_text, iter_text_nodes
from .settings import PERSONAL_WORDS, SELECTED_LISTS, SettingsStore

logger = logging.getLogger(__name__)


def is_blocked_host(hostname: Optional[str], blocked: Sequence[str]) -> bool:
    """True when ``hostname`` contains one of ``blocked`` as a run of labels.

    ``"google"`` blocks ``www.google.com`` and ``google.co.uk``;
    ``"bing.com"`` blocks ``www.bing.com`` but not ``bing.com.example.org``
    unless the labels line up.
    """

    if not hostname:
        return False
    labels = hostname.lower().strip(".").split(".")
    for item in blocked:
        wanted = item.lower().strip(".").split(".")
        size = len(wanted)
        for start in range(len(labels) - size + 1):
            if labels[start : start + size] == wanted:
                return True
    return False


@dataclass
class EngineDependencies:
    """Convenience container for the collaborating services."""

    tokenizer: Tokenizer = field(default_factory=Tokenizer)
    extractor: ContextExtractor = field(default_factory=ContextExtractor)
    scorer: TranslationScorer = field(default_factory=TranslationScorer)
    renderer: Renderer = field(default_factory=Renderer)


class AnnotationEngine:
    """Owns one dictionary and its budget; annotates documents with it.

    A configuration change never mutates an engine: the host builds a new one.
    """

    def __init__(
        self,
        dictionary: DictionaryStore,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
        deps: EngineDependencies | None = None,
    ) -> None:
        self.dictionary = dictionary
        self.config = config or EngineConfig()
        deps = deps or EngineDependencies()
        self.tokenizer = deps.tokenizer
        self.extractor = deps.extractor
        self.scorer = deps.scorer
        self.renderer = deps.renderer
        self.selector = ReplacementSelector(
            max_replacements=self.config.max_replacements,
            probability=self.config.replacement_probability,
            rng=rng,
        )

    @property
    def budget_used(self) -> int:
        return self.selector.count

    def annotate(self, document: BeautifulSoup) -> List[Annotation]:
        annotations: List[Annotation] = []
        if not len(self.dictionary):
            return annotations
        for node in iter_text_nodes(document):
            if self.selector.exhausted:
                break
            annotations.extend(self._annotate_node(document, node))
        logger.debug("Annotated %d words (%d/%d budget used)", len(annotations),
                     self.selector.count, self.selector.max_replacements)
        return annotations

    def _annotate_node(self, document: BeautifulSoup, node: NavigableString) -> List[Annotation]:
        pieces: List[str | Tag] = []
        created: List[Annotation] = []
        for token in self.tokenizer.tokenize(str(node), origin=node):
            entry = None
            if (
                not self.selector.exhausted
                and self.tokenizer.is_candidate(token, self.dictionary)
                and self.selector.consider()
            ):
                entry = self.dictionary.lookup(token.text)
            if entry is None:
                pieces.append(token.text)
                continue
            meaning = self.choose_meaning(entry, node, token.text)
            annotation = self.renderer.render(token.text, entry, meaning)
            pieces.append(self.renderer.to_tag(document, annotation))
            created.append(annotation)
        if created:
            self.renderer.replace_text_node(document, node, pieces)
        return created

    def choose_meaning(self, entry: Entry, node: NavigableString, word: str) -> str:
        if not self.config.contextual_scoring or len(entry.translations) <= 1:
            return entry.primary_meaning
        context = self.extractor.extract(context_text(node), word)
        return self.scorer.select(entry, context)


ReloadRunner = Callable[[Callable[[], Optional[AnnotationEngine]]], None]


class EngineHost:
    """Keeps the current engine in sync with the user's settings.

    Loads are serialised. A load that has been superseded by a newer request
    is dropped, and its caller waits for the newest engine instead.

    ``reload_runner`` decides where reloads triggered by settings changes run;
    by default they run on the thread that changed the settings.
    """

    def __init__(
        self,
        config: AppConfig,
        settings: SettingsStore,
        resolver: ListResolver | None = None,
        rng: random.Random | None = None,
        deps: EngineDependencies | None = None,
        reload_runner: ReloadRunner | None = None,
    ) -> None:
        self.config = config
        self.settings = settings
        self.resolver = resolver or ListResolver.from_config(config.lists)
        self.reload_runner = reload_runner
        self._rng = rng
        self._deps = deps
        self._engine: Optional[AnnotationEngine] = None
        self._generation = 0
        self._settled = 0
        self._state = threading.Condition()
        self._load_lock = threading.Lock()
        self._subscribed = False
        self.enabled = True

    @property
    def engine(self) -> Optional[AnnotationEngine]:
        return self._engine

    def start(self, hostname: Optional[str] = None) -> bool:
        """Load the dictionary unless ``hostname`` is blocked; return whether enabled."""

        if is_blocked_host(hostname, self.config.engine.blocked_domains):
            logger.info("Not annotating blocked host %s", hostname)
            self.enabled = False
            return False
        self.enabled = True
        self.reload()
        if not self._subscribed:
            self.settings.subscribe(self._on_settings_changed)
            self._subscribed = True
        return True

    def close(self) -> None:
        if self._subscribed:
            self.settings.unsubscribe(self._on_settings_changed)
            self._subscribed = False

    def _on_settings_changed(self, keys: FrozenSet[str]) -> None:
        if keys & {SELECTED_LISTS, PERSONAL_WORDS}:
            logger.info("Settings changed, reloading dictionary")
            if self.reload_runner is None:
                self.reload()
            else:
                self.reload_runner(self.reload)

    def _is_current(self, generation: int) -> bool:
        with self._state:
            return generation == self._generation

    def reload(self) -> Optional[AnnotationEngine]:
        """Build a fresh engine and return the newest one once it is installed."""

        with self._state:
            self._generation += 1
            generation = self._generation
        try:
            with self._load_lock:
                if self._is_current(generation):
                    engine = AnnotationEngine(self.build_dictionary(), self.config.engine, self._rng, self._deps)
                    with self._state:
                        if generation == self._generation:
                            self._engine = engine
                        else:
                            logger.debug("Discarding superseded dictionary load")
        finally:
            with self._state:
                self._settled = max(self._settled, generation)
                self._state.notify_all()
        with self._state:
            self._state.wait_for(lambda: self._settled >= self._generation)
            return self._engine

    def build_dictionary(self) -> DictionaryStore:
        selected = self.settings.selected_lists
        base_lists = self.resolver.order(item for item in selected if item != PERSONAL_LIST_ID)
        personal = self.settings.personal_words if PERSONAL_LIST_ID in selected else None
        logger.info("Loading dictionary lists: %s", ", ".join(selected))
        return build_dictionary(base_lists, self.resolver, personal, PERSONAL_LIST_ID)

    def annotate(self, document: BeautifulSoup) -> List[Annotation]:
        engine = self._engine
        if not self.enabled or engine is None:
            return []
        return engine.annotate(document)


__all__ = ["AnnotationEngine", "EngineDependencies", "EngineHost", "is_blocked_host"]
