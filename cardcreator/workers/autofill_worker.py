"""
Autofill Worker
===============

Worker pour analyser un CV PDF en arrière-plan et proposer des champs.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QThread, Signal
from loguru import logger

from ..common.errors import CardCreatorError
from ..services.autofill import ResumeAutofillService, extract_text_from_pdf


class AutofillWorker(QThread):
    """Extracts a résumé and asks the autofill service for card fields."""

    progress_updated = Signal(str)
    autofill_finished = Signal(object)    # ProfilePatch
    highlights_ready = Signal(list)
    error_occurred = Signal(str)

    def __init__(self, file_path: str, service: Optional[ResumeAutofillService] = None,
                 highlights_context: str = "", parent=None):
        super().__init__(parent)
        self.file_path = file_path
        self.service = service or ResumeAutofillService()
        self.highlights_context = highlights_context

    def run(self):
        try:
            self.progress_updated.emit(f"Reading {Path(self.file_path).name}...")
            text = extract_text_from_pdf(self.file_path)

            self.progress_updated.emit("Analyzing résumé...")
            patch = self.service.suggest_fields_from_text(text)
            self.autofill_finished.emit(patch)

            if self.highlights_context.strip():
                self.progress_updated.emit("Generating highlights...")
                self.highlights_ready.emit(
                    self.service.generate_highlights(text, self.highlights_context)
                )
            self.progress_updated.emit("Autofill complete")
        except CardCreatorError as e:
            logger.error(f"Autofill failed for {Path(self.file_path).name}: {e}")
            self.error_occurred.emit(e.user_message)
