"""Application runner."""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from pharmacy_app.config import configure_logging, load_config
from pharmacy_app.ui.main_window import MainWindow
from pharmacy_app.ui.styles import APP_STYLE

logger = logging.getLogger(__name__)


def run() -> int:
    app = QApplication(sys.argv)
    app.setApplicationName("Pharmacy App")
    app.setOrganizationName("PharmacyMS")
    app.setStyleSheet(APP_STYLE)

    config = load_config()
    configure_logging(config.log_level)
    logger.info("Starting with API %s, storage %s", config.api_base_url, config.storage_path)
    window = MainWindow(config)

    screen = app.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        width = max(980, int(geometry.width() * 0.85))
        height = max(680, int(geometry.height() * 0.85))
        window.resize(min(width, geometry.width()), min(height, geometry.height()))
    else:
        window.resize(1280, 820)

    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
