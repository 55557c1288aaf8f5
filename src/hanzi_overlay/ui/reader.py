"""Reader window that shows an annotated page and handles clicks on glosses."""

from __future__ import annotations

import copy
import logging
from typing import Callable, Dict, List, Optional, Union

from bs4 import BeautifulSoup
from PySide6.QtCore import QObject, QThread, QUrl, Signal
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QApplication,
    QCheckBox,
    QHBoxLayout,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QStatusBar,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from ..config import PERSONAL_LIST_ID, AppConfig
from ..services.page import (
    ANNOTATION_ID_ATTR,
    PHONETIC_CLASS,
    SCRIPT_CLASS,
    ToggleController,
    is_annotation_tag,
    load_page,
    parse_html,
)
from ..services.pipeline import EngineHost
from ..services.settings import SettingsStore

logger = logging.getLogger(__name__)

_GLOSS_SCHEME = "gloss"


class _LoadWorker(QObject):
    finished = Signal(object, int)
    failed = Signal(object)

    def __init__(self, host: EngineHost, location: str, timeout: float) -> None:
        super().__init__()
        self._host = host
        self._location = location
        self._timeout = timeout

    def run(self) -> None:
        try:
            page = load_page(self._location, timeout=self._timeout)
            document = parse_html(page.html)
            count = 0
            if self._host.start(page.hostname):
                count = len(self._host.annotate(document))
        except Exception as exc:  # pragma: no cover - surfaced in the status bar
            self.failed.emit(exc)
        else:
            self.finished.emit(document, count)


class _ReloadWorker(QObject):
    finished = Signal(object)
    failed = Signal(object)

    def __init__(self, reload: Callable[[], object]) -> None:
        super().__init__()
        self._reload = reload

    def run(self) -> None:
        try:
            engine = self._reload()
        except Exception as exc:  # pragma: no cover - surfaced in the status bar
            self.failed.emit(exc)
        else:
            self.finished.emit(engine)


def to_qt_html(document: BeautifulSoup) -> str:
    """Wrap each annotation's content in a link ``QTextBrowser`` can report clicks on."""

    view = copy.copy(document)
    for tag in view.find_all(is_annotation_tag):
        anchor = view.new_tag("a", href=f"{_GLOSS_SCHEME}:{tag.get(ANNOTATION_ID_ATTR, '')}")
        anchor["title"] = tag.get("title", "")
        for child in list(tag.contents):
            anchor.append(child.extract())
        tag.append(anchor)
    return str(view)


class ReaderWindow(QMainWindow):
    """Primary window: location bar, list selection and the annotated page."""

    def __init__(self, config: AppConfig, settings: SettingsStore, host: EngineHost) -> None:
        super().__init__()
        self.config = config
        self.settings = settings
        self.host = host
        self._document: Optional[BeautifulSoup] = None
        self._toggles: Optional[ToggleController] = None
        self._workers: Dict[Union[_LoadWorker, _ReloadWorker], QThread] = {}
        self.host.reload_runner = self._reload_in_background

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

        self._location = QLineEdit()
        self._location.setPlaceholderText("File path or http(s) URL")
        self._open_button = QPushButton("Open")
        self._save_button = QPushButton("Save lists")
        self._list_boxes: List[QCheckBox] = []
        selected = set(self.settings.selected_lists)
        for list_id in [*self.config.lists.sources, PERSONAL_LIST_ID]:
            box = QCheckBox(list_id)
            box.setChecked(list_id in selected)
            self._list_boxes.append(box)

        self._browser = QTextBrowser()
        self._browser.setOpenLinks(False)
        self._browser.setOpenExternalLinks(False)
        self._browser.document().setDefaultStyleSheet(self._stylesheet())

        self._build_layout()

        self._open_button.clicked.connect(self._on_open_clicked)
        self._location.returnPressed.connect(self._on_open_clicked)
        self._save_button.clicked.connect(self._on_save_clicked)
        self._browser.anchorClicked.connect(self._on_anchor_clicked)

        self.setWindowTitle("Hanzi Overlay Reader")
        self.resize(900, 700)
        self._status_bar.showMessage("Open a page to start")

    def _stylesheet(self) -> str:
        reader = self.config.reader
        return (
            f"body {{ font-family: '{reader.font_family}'; font-size: {reader.font_size}px; }}"
            "a { text-decoration: none; color: inherit; }"
            f".{SCRIPT_CLASS} {{ color: {reader.script_color}; font-weight: bold; }}"
            f".{PHONETIC_CLASS} {{ color: {reader.phonetic_color}; font-size: small; }}"
        )

    def _build_layout(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        location_layout = QHBoxLayout()
        location_layout.addWidget(self._location)
        location_layout.addWidget(self._open_button)
        layout.addLayout(location_layout)

        lists_layout = QHBoxLayout()
        for box in self._list_boxes:
            lists_layout.addWidget(box)
        lists_layout.addStretch()
        lists_layout.addWidget(self._save_button)
        layout.addLayout(lists_layout)

        layout.addWidget(self._browser)
        self.setCentralWidget(central)

    def open_location(self, location: str) -> None:
        location = location.strip()
        if not location:
            return
        self._location.setText(location)
        self._status_bar.showMessage(f"Loading {location}…")
        worker = _LoadWorker(self.host, location, self.config.lists.http_timeout)
        worker.finished.connect(self._on_load_finished)
        worker.failed.connect(self._on_load_failed)
        self._start_worker(worker)

    def _start_worker(self, worker: Union[_LoadWorker, _ReloadWorker]) -> None:
        thread = QThread(self)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        self._workers[worker] = thread
        thread.start()

    def _reload_in_background(self, reload: Callable[[], object]) -> None:
        self._status_bar.showMessage("Reloading dictionary…")
        worker = _ReloadWorker(reload)
        worker.finished.connect(self._on_reload_finished)
        worker.failed.connect(self._on_load_failed)
        self._start_worker(worker)

    def _release_worker(self) -> None:
        sender = self.sender()
        if not isinstance(sender, (_LoadWorker, _ReloadWorker)):
            return
        thread = self._workers.pop(sender, None)
        if thread is not None:
            thread.quit()
            thread.wait(100)
            thread.deleteLater()
        sender.deleteLater()

    def _on_load_finished(self, document: BeautifulSoup, count: int) -> None:
        self._release_worker()
        self._document = document
        self._toggles = ToggleController(document)
        self._render()
        if self.host.enabled:
            self._status_bar.showMessage(f"{count} words annotated")
        else:
            self._status_bar.showMessage("Annotations are disabled on this site")

    def _on_reload_finished(self, engine: object) -> None:
        self._release_worker()
        if engine is not None:
            self._status_bar.showMessage("Dictionary reloaded. Reload page to apply.", 2000)

    def _on_load_failed(self, exc: Exception) -> None:
        self._release_worker()
        logger.error("Loading page failed: %s", exc)
        self._status_bar.showMessage(f"Failed: {exc}")

    def _on_open_clicked(self) -> None:
        self.open_location(self._location.text())

    def _on_save_clicked(self) -> None:
        selected = [box.text() for box in self._list_boxes if box.isChecked()]
        if not self.settings.update(selected_lists=selected):
            self._status_bar.showMessage("Settings unchanged", 2000)

    def _on_anchor_clicked(self, url: QUrl) -> None:
        if url.scheme() != _GLOSS_SCHEME or self._toggles is None:
            return
        if self._toggles.toggle(url.path()) is not None:
            self._render()

    def _render(self) -> None:
        if self._document is None:
            return
        scroll = self._browser.verticalScrollBar()
        position = scroll.value()
        self._browser.setHtml(to_qt_html(self._document))
        scroll.setValue(position)

    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        self.host.close()
        self.host.reload_runner = None
        for thread in self._workers.values():
            thread.quit()
            thread.wait(500)
        QApplication.quit()
        super().closeEvent(event)


__all__ = ["ReaderWindow", "to_qt_html"]
