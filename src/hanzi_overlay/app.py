"""Reader application bootstrapper."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from .config import AppConfig
from .services.pipeline import EngineHost
from .services.settings import open_settings
from .ui.reader import ReaderWindow


def main() -> int:
    """Entry point used by both console scripts and ``python -m``."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)

    config = AppConfig()
    settings = open_settings(config.settings_path, config.lists.default_lists)
    host = EngineHost(config, settings)
    window = ReaderWindow(config, settings, host)
    window.show()
    if len(sys.argv) > 1:
        window.open_location(sys.argv[1])

    return app.exec()


if __name__ == "__main__":  # pragma: no cover - manual invocation only
    raise SystemExit(main())
