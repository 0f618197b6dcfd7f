"""
Application entry point and dark-theme stylesheet.

Usage:
    python -m cropper.app [IMAGE] [--verbose]
    cropper [IMAGE]          (after pip install)
"""

import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from cropper.main_window import MainWindow

DARK_STYLESHEET = """
    QMainWindow { background: #2b2b2b; }
    QWidget { background: #2b2b2b; color: #ddd; font-size: 10pt; }
    QComboBox { background: #3a3a3a; border: 1px solid #555; border-radius: 4px; padding: 2px 8px; }
    QToolBar { background: #333; border-bottom: 1px solid #444; spacing: 4px; padding: 4px; }
    QStatusBar { background: #333; border-top: 1px solid #444; }
"""


def main():
    parser = argparse.ArgumentParser(prog="cropper", description="Select and crop a region of an image.")
    parser.add_argument("image", nargs="?", type=Path, help="image to open on startup")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args, qt_args = parser.parse_known_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication([sys.argv[0], *qt_args])
    app.setStyleSheet(DARK_STYLESHEET)

    window = MainWindow()
    window.show()
    if args.image is not None:
        window.open_path(args.image)

    try:
        sys.exit(app.exec())
    except (SystemExit, KeyboardInterrupt):
        pass


if __name__ == "__main__":
    main()
