"""Background PDF build and write for one export trigger."""

from typing import Optional

from PySide6.QtCore import QThread, Signal
from loguru import logger

from ..common.errors import CardCreatorError
from ..controllers.capture_builder import CaptureSnapshot
from ..controllers.export_manager import ExportManager, ExportTicket


class ExportWorker(QThread):
    """Builds the card for ``ticket`` and saves it if it is still the latest export.

    The capture backend needs its snapshot taken on the GUI thread first;
    pass it in as ``snapshot`` and only the PDF assembly runs here.
    """

    export_finished = Signal(object)    # ExportResult
    export_discarded = Signal(int)
    error_occurred = Signal(str)

    def __init__(self, manager: ExportManager, ticket: ExportTicket,
                 snapshot: Optional[CaptureSnapshot] = None, parent=None):
        super().__init__(parent)
        self.manager = manager
        self.ticket = ticket
        self.snapshot = snapshot

    def run(self):
        try:
            if self.snapshot is not None:
                export = self.manager.exporter(self.ticket.backend).build(self.snapshot, self.ticket.record)
            else:
                export = self.manager.render(self.ticket)
            result = self.manager.finish(self.ticket, export)
        except CardCreatorError as e:
            if not self.manager.is_current(self.ticket):
                logger.info(f"Ignoring failure of stale export #{self.ticket.generation}: {e}")
                self.export_discarded.emit(self.ticket.generation)
                return
            logger.error(f"Export #{self.ticket.generation} failed: {e}")
            self.error_occurred.emit(e.user_message)
            return

        if result is None:
            self.export_discarded.emit(self.ticket.generation)
        else:
            self.export_finished.emit(result)
