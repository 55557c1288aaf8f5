"""Adapter between the annotation engine and a parsed HTML document.

This is the only module that reads or mutates document structure. Everything
it hands to the core is plain text; everything it receives back is an
:class:`~hanzi_overlay.core.models.Annotation`.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

from ..core.models import Annotation, AnnotationState, Entry
from ..errors import HanziOverlayError

ANNOTATION_CLASS = "hanzi-gloss-word"
SCRIPT_CLASS = "hanzi-gloss-script"
PHONETIC_CLASS = "hanzi-gloss-phonetic"
BLOCK_CLASS = "hanzi-gloss-block"
ANNOTATION_ID_ATTR = "data-annotation-id"
MARKER_ATTR = "data-hanzi-gloss"

EXCLUDED_TAGS = frozenset({"script", "style", "input", "textarea", "code", "pre", "noscript", "template"})

_SKIPPED_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)
_annotation_ids = itertools.count(1)


@dataclass(slots=True)
class PageSource:
    html: str
    hostname: Optional[str]
    location: str


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def load_page(location: str, timeout: float = 10.0) -> PageSource:
    """Read ``location`` from disk or over HTTP.

    Raises :class:`HanziOverlayError` when the page cannot be obtained.
    """

    if location.startswith(("http://", "https://")):
        try:
            response = requests.get(location, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise HanziOverlayError(f"cannot fetch {location}: {exc}") from exc
        return PageSource(response.text, urlparse(location).hostname, location)
    try:
        html = Path(location).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise HanziOverlayError(f"cannot read {location}: {exc}") from exc
    return PageSource(html, None, location)


def _has_class(tag: Tag, name: str) -> bool:
    return name in (tag.get("class") or [])


def iter_text_nodes(document: BeautifulSoup) -> Iterator[NavigableString]:
    """Yield visible, non-blank text nodes in document order."""

    root = document.body or document
    for node in list(root.descendants):
        if not isinstance(node, NavigableString) or isinstance(node, _SKIPPED_STRINGS):
            continue
        parent = node.parent
        if parent is None or parent.name in EXCLUDED_TAGS:
            continue
        if not node.strip():
            continue
        if closest_annotation(node) is not None:
            continue
        yield node


def context_root(node: NavigableString, max_levels: int = 3) -> Optional[Tag]:
    """Smallest ancestor whose parent would not add text, at most ``max_levels`` up."""

    element = node.parent
    if element is None:
        return None
    for _ in range(max_levels):
        parent = element.parent
        if parent is None or len(parent.get_text()) <= len(element.get_text()):
            break
        element = parent
    return element


def context_text(node: NavigableString, max_levels: int = 3) -> str:
    root = context_root(node, max_levels)
    if root is None:
        return ""
    return root.get_text()


def is_annotation_tag(tag: Tag) -> bool:
    """True only for spans written by :class:`Renderer`, never for page markup."""

    return (
        isinstance(tag, Tag)
        and tag.has_attr(MARKER_ATTR)
        and tag.has_attr(ANNOTATION_ID_ATTR)
        and _has_class(tag, ANNOTATION_CLASS)
    )


def closest_annotation(target: Union[Tag, NavigableString, None]) -> Optional[Tag]:
    if target is None:
        return None
    if is_annotation_tag(target):
        return target
    return target.find_parent(is_annotation_tag)


class Renderer:
    """Create annotations and write them into the document."""

    def render(self, original_text: str, entry: Entry, meaning: str) -> Annotation:
        return Annotation(
            original_text=original_text,
            script_form=entry.script_form,
            phonetic_form=entry.phonetic_form,
            selected_meaning=meaning,
        )

    def to_tag(self, document: BeautifulSoup, annotation: Annotation) -> Tag:
        tag = document.new_tag("span")
        tag["class"] = [ANNOTATION_CLASS]
        tag[MARKER_ATTR] = ""
        tag[ANNOTATION_ID_ATTR] = str(next(_annotation_ids))
        tag["data-original"] = annotation.original_text
        tag["data-script"] = annotation.script_form
        tag["data-phonetic"] = annotation.phonetic_form
        tag["data-meaning"] = annotation.selected_meaning
        self.write(document, tag, annotation)
        return tag

    @staticmethod
    def write(document: BeautifulSoup, tag: Tag, annotation: Annotation) -> None:
        tag["data-state"] = annotation.state.value
        tag["title"] = annotation.hover_text
        tag.clear()
        if annotation.state is AnnotationState.ORIGINAL:
            tag.append(NavigableString(annotation.original_text))
            return
        script = document.new_tag("span")
        script["class"] = [SCRIPT_CLASS]
        script.string = annotation.script_form
        phonetic = document.new_tag("span")
        phonetic["class"] = [PHONETIC_CLASS]
        phonetic.string = annotation.phonetic_form
        tag.append(script)
        tag.append(phonetic)

    @staticmethod
    def read(tag: Tag) -> Optional[Annotation]:
        """Annotation stored on ``tag``, or ``None`` when its state is not one we write."""

        try:
            state = AnnotationState(tag.get("data-state", AnnotationState.REVEALED.value))
        except ValueError:
            return None
        return Annotation(
            original_text=tag.get("data-original", ""),
            script_form=tag.get("data-script", ""),
            phonetic_form=tag.get("data-phonetic", ""),
            selected_meaning=tag.get("data-meaning", ""),
            state=state,
        )

    def replace_text_node(
        self, document: BeautifulSoup, node: NavigableString, pieces: Sequence[Union[str, Tag]]
    ) -> Tag:
        wrapper = document.new_tag("span")
        wrapper["class"] = [BLOCK_CLASS]
        for piece in pieces:
            wrapper.append(piece if isinstance(piece, Tag) else NavigableString(piece))
        node.replace_with(wrapper)
        return wrapper


class ToggleController:
    """Single click handler for every annotation in a document.

    Targets are resolved to their enclosing annotation at interaction time, so
    annotations added after the controller was created are handled too.
    """

    def __init__(self, document: BeautifulSoup, renderer: Optional[Renderer] = None) -> None:
        self.document = document
        self.renderer = renderer or Renderer()

    def handle(self, target: Union[Tag, NavigableString, None]) -> Optional[Annotation]:
        tag = closest_annotation(target)
        if tag is None:
            return None
        current = self.renderer.read(tag)
        if current is None:
            return None
        annotation = current.toggled()
        self.renderer.write(self.document, tag, annotation)
        return annotation

    def find(self, annotation_id: str) -> Optional[Tag]:
        return self.document.find(attrs={ANNOTATION_ID_ATTR: annotation_id})

    def toggle(self, annotation_id: str) -> Optional[Annotation]:
        return self.handle(self.find(annotation_id))

    def annotations(self) -> List[Annotation]:
        found = (self.renderer.read(tag) for tag in self.document.find_all(is_annotation_tag))
        return [annotation for annotation in found if annotation is not None]


__all__ = [
    "ANNOTATION_CLASS",
    "MARKER_ATTR",
    "PageSource",
    "Renderer",
    "ToggleController",
    "context_root",
    "context_text",
    "is_annotation_tag",
    "iter_text_nodes",
    "load_page",
    "parse_html",
]
