"""Application entry point."""

from __future__ import annotations

import logging
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication

from envelope_designer.config import load_settings
from envelope_designer.ui.main_window import MainWindow

SETTINGS_PATH = Path.home() / ".envelope-designer.json"


def main() -> int:
    settings = load_settings(SETTINGS_PATH)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    window = MainWindow(settings)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
