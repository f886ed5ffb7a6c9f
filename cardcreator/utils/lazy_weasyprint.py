"""
Lazy WeasyPrint
===============

Chargement paresseux de WeasyPrint pour l'export déclaratif.
WeasyPrint tire Pango/Cairo au premier import : l'application doit démarrer
(et l'export « capture » fonctionner) même quand ces bibliothèques manquent.
"""

import io
import sys
from typing import Optional

from loguru import logger

from ..common.errors import ExportError

# Banner lines printed by WeasyPrint/fontconfig that carry no information
_NOISE_KEYWORDS = ('weasyprint', 'external libraries', 'courtbouillon', 'fontconfig', 'pango')
_LOG_MARKERS = ('INFO', 'WARNING', 'ERROR', 'DEBUG')

UNAVAILABLE_MESSAGE = "PDF export is unavailable: WeasyPrint is not installed correctly."


class _QuietStderr:
    """Swallow library banner noise on stderr while keeping log lines."""

    def __enter__(self):
        self._original = sys.stderr
        sys.stderr = io.StringIO()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        captured = sys.stderr.getvalue()
        sys.stderr = self._original
        for line in captured.splitlines():
            lowered = line.lower()
            if any(k in lowered for k in _NOISE_KEYWORDS) and not any(m in line for m in _LOG_MARKERS):
                continue
            if line.strip():
                print(line, file=sys.stderr)


class LazyWeasyPrint:
    """Imports WeasyPrint on first use and renders card HTML to PDF bytes."""

    def __init__(self):
        self._module = None
        self._available: Optional[bool] = None
        self._error_reason: Optional[str] = None

    def _load(self):
        if self._module is not None or self._available is False:
            return self._module

        logger.info("Loading WeasyPrint for declarative export...")
        try:
            with _QuietStderr():
                import weasyprint
        except ImportError as e:
            self._fail(f"Import error: {e}")
            logger.info("Install with: pip install weasyprint")
            return None
        except OSError as e:
            # Python package present, Pango/Cairo missing
            self._fail(f"System libraries missing: {e}")
            logger.info("See: https://doc.courtbouillon.org/weasyprint/stable/first_steps.html")
            return None

        self._module = weasyprint
        self._available = True
        logger.info(f"WeasyPrint {getattr(weasyprint, '__version__', '?')} loaded")
        return weasyprint

    def _fail(self, reason: str) -> None:
        self._available = False
        self._error_reason = reason
        logger.error(f"WeasyPrint unavailable: {reason}")

    @property
    def available(self) -> bool:
        if self._available is None:
            self._load()
        return bool(self._available)

    @property
    def error_reason(self) -> Optional[str]:
        return self._error_reason

    def write_pdf(self, html: str, base_url: Optional[str] = None) -> bytes:
        """Render an HTML document to PDF bytes.

        Relative asset URLs resolve against ``base_url``. Raises
        :class:`ExportError` when WeasyPrint is missing or fails.
        """
        weasyprint = self._load()
        if weasyprint is None:
            raise ExportError(f"WeasyPrint unavailable: {self._error_reason}",
                              user_message=UNAVAILABLE_MESSAGE)
        try:
            with _QuietStderr():
                return weasyprint.HTML(string=html, base_url=base_url).write_pdf()
        except Exception as e:
            # WeasyPrint raises a wide range of parser/layout errors
            logger.error(f"WeasyPrint failed to render the card: {e}")
            raise ExportError(str(e)) from e


# Instance globale
_lazy_weasyprint = LazyWeasyPrint()


def get_weasyprint() -> LazyWeasyPrint:
    return _lazy_weasyprint


def is_weasyprint_available() -> bool:
    """Vérifier si WeasyPrint est disponible (déclenche le chargement)."""
    return _lazy_weasyprint.available
