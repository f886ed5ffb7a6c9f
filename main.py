#!/usr/bin/env python3
"""
Candidate Card Creator - Point d'entrée
=======================================

Lance l'interface : aperçu de la carte, historique et export PDF.
"""

import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from cardcreator import __version__
from cardcreator.config import DEFAULT_CONFIG
from cardcreator.logging import configure_logging
from cardcreator.utils.lazy_weasyprint import is_weasyprint_available


class CardCreatorApp(QApplication):
    """Application principale."""

    def __init__(self, args):
        super().__init__(args)
        self.setApplicationName("Candidate Card Creator")
        self.setApplicationVersion(__version__)
        self.setOrganizationName("CardCreator")
        logger.info(f"Demarrage Candidate Card Creator {__version__}")


def main() -> int:
    configure_logging(DEFAULT_CONFIG)
    app = CardCreatorApp(sys.argv)

    if not is_weasyprint_available():
        logger.warning("WeasyPrint non disponible - seul l'export 'capture' fonctionnera")

    from cardcreator.views.main_window import MainWindow

    window = MainWindow(DEFAULT_CONFIG)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
