"""
Main Window
===========

Fenêtre principale : formulaire, aperçu de la carte, historique récent, autofill et export.
"""

import json
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFileDialog, QHBoxLayout, QInputDialog, QLabel, QListWidget, QListWidgetItem, QMainWindow,
    QMessageBox, QPushButton, QScrollArea, QStatusBar, QVBoxLayout, QWidget
)
from loguru import logger

from ..common.errors import CardCreatorError
from ..config import DEFAULT_CONFIG, CardCreatorConfig
from ..controllers.capture_builder import CaptureAndMapDocumentBuilder
from ..controllers.export_manager import ExportManager, ExportResult
from ..controllers.main_window import CoordinatorContext, HistoryCoordinator, ProfileStateCoordinator
from ..schemas.profile_schema import ProfilePatch
from ..services.autofill import ResumeAutofillService
from ..widgets.scaled_preview import ScaledCardPreview
from ..workers.autofill_worker import AutofillWorker
from ..workers.export_worker import ExportWorker
from .card_widget import CardWidget
from .profile_form import ProfileFormPanel
from .qt_surface import QtCardSurface


class MainWindow(QMainWindow):
    """Card form and preview with recent cards, résumé autofill and PDF export."""

    def __init__(self, config: Optional[CardCreatorConfig] = None,
                 export_manager: Optional[ExportManager] = None,
                 autofill_service: Optional[ResumeAutofillService] = None):
        super().__init__()
        self.config = config or DEFAULT_CONFIG
        self.export_manager = export_manager or ExportManager(self.config)
        self.autofill_service = autofill_service or ResumeAutofillService(config=self.config)
        self.history = HistoryCoordinator(self.export_manager.history)
        self.profile_state = ProfileStateCoordinator()

        self._workers = set()

        self.setWindowTitle("Candidate Card Creator")
        self.resize(1400, 820)
        self.setup_ui()

        context = CoordinatorContext(status=self.statusBar().showMessage)
        for coordinator in (self.history, self.profile_state):
            coordinator.bind(context)
        self.profile_state.subscribe(self.form.set_record)
        self.profile_state.subscribe(self.preview.card.set_record)
        self.form.field_changed.connect(self.profile_state.update_field)
        self.refresh_recent_cards()

    def setup_ui(self):
        central = QWidget()
        layout = QHBoxLayout(central)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        sidebar = QVBoxLayout()
        sidebar.setSpacing(8)

        self.open_button = QPushButton("Open profile…")
        self.open_button.clicked.connect(self.open_profile)
        self.autofill_button = QPushButton("Autofill from résumé PDF…")
        self.autofill_button.clicked.connect(self.autofill_from_pdf)
        self.new_button = QPushButton("New card")
        self.new_button.clicked.connect(self.profile_state.new_card)

        self.export_button = QPushButton("Export PDF")
        self.export_button.clicked.connect(lambda: self.export_card("declarative"))
        self.capture_button = QPushButton("Export PDF (as previewed)")
        self.capture_button.clicked.connect(lambda: self.export_card("capture"))

        for button in (self.new_button, self.open_button, self.autofill_button,
                       self.export_button, self.capture_button):
            sidebar.addWidget(button)

        recent_header = QHBoxLayout()
        recent_header.addWidget(QLabel("<b>Recent Cards</b>"))
        recent_header.addStretch()
        self.clear_history_button = QPushButton("Clear History")
        self.clear_history_button.clicked.connect(self.clear_history)
        recent_header.addWidget(self.clear_history_button)
        sidebar.addLayout(recent_header)

        self.recent_list = QListWidget()
        self.recent_list.itemClicked.connect(self.load_recent_card)
        sidebar.addWidget(self.recent_list, 1)
        hint = QLabel("Click on any card to reload its information")
        hint.setStyleSheet("color: #9CA3AF; font-size: 11px;")
        sidebar.addWidget(hint)

        sidebar_widget = QWidget()
        sidebar_widget.setLayout(sidebar)
        sidebar_widget.setFixedWidth(300)
        layout.addWidget(sidebar_widget)

        self.form = ProfileFormPanel()
        form_scroll = QScrollArea()
        form_scroll.setWidgetResizable(True)
        form_scroll.setWidget(self.form)
        form_scroll.setFixedWidth(400)
        layout.addWidget(form_scroll)

        self.preview = ScaledCardPreview(CardWidget(), self.config)
        layout.addWidget(self.preview, 1)

        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())

    # ------------------------------------------------------------------
    # Profile loading
    # ------------------------------------------------------------------
    def open_profile(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open profile", "", "Profile (*.json)")
        if not path:
            return
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
            self.profile_state.load_form_data(data)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Erreur lecture profil : {e}")
            QMessageBox.warning(self, "Open profile", f"Could not read {Path(path).name}.")
        except CardCreatorError as e:
            QMessageBox.warning(self, "Open profile", e.user_message)

    def autofill_from_pdf(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select résumé", "", "PDF (*.pdf)")
        if not path:
            return
        context, _ = QInputDialog.getText(
            self, "Autofill", "Focus for generated highlights (leave empty to skip):"
        )
        worker = AutofillWorker(path, self.autofill_service, highlights_context=context, parent=self)
        worker.progress_updated.connect(self.statusBar().showMessage)
        worker.autofill_finished.connect(self.profile_state.apply_suggestions)
        worker.highlights_ready.connect(
            lambda items: self.profile_state.apply_suggestions(ProfilePatch(highlights=items))
        )
        worker.error_occurred.connect(lambda msg: QMessageBox.warning(self, "Autofill", msg))
        self._start(worker, self.autofill_button)

    # ------------------------------------------------------------------
    # Recent cards
    # ------------------------------------------------------------------
    def refresh_recent_cards(self):
        self.recent_list.clear()
        rows = self.history.list_card_rows()
        for row in rows:
            item = QListWidgetItem(f"{row.display_name}\n{row.subtitle}")
            item.setData(Qt.UserRole, row.summary.id)
            self.recent_list.addItem(item)
        self.clear_history_button.setEnabled(bool(rows))

    def load_recent_card(self, item: QListWidgetItem):
        record = self.history.load_card(item.data(Qt.UserRole))
        if record is not None:
            self.profile_state.load(record)

    def clear_history(self):
        self.history.clear_history()
        self.refresh_recent_cards()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export_card(self, backend: str):
        record = self.profile_state.record
        try:
            ticket = self.export_manager.begin(record, backend)
            snapshot = None
            exporter = self.export_manager.exporter(backend)
            if isinstance(exporter, CaptureAndMapDocumentBuilder):
                # Grabbing widgets must happen on the GUI thread.
                snapshot = exporter.capture(QtCardSurface(self.preview))
        except CardCreatorError as e:
            QMessageBox.critical(self, "Export", e.user_message)
            return

        self.statusBar().showMessage("Exporting card…")
        worker = ExportWorker(self.export_manager, ticket, snapshot, parent=self)
        worker.export_finished.connect(self.on_export_finished)
        worker.error_occurred.connect(lambda msg: QMessageBox.critical(self, "Export", msg))
        self._start(worker)

    def on_export_finished(self, result: ExportResult):
        message = f"Saved {result.path.name}"
        if result.warnings:
            message += f" ({len(result.warnings)} element(s) omitted)"
        self.statusBar().showMessage(message, 8000)
        self.refresh_recent_cards()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _start(self, worker, button: Optional[QPushButton] = None):
        self._workers.add(worker)
        if button is not None:
            button.setEnabled(False)
            worker.finished.connect(lambda: button.setEnabled(True))
        worker.finished.connect(lambda: self._workers.discard(worker))
        worker.finished.connect(worker.deleteLater)
        worker.start()

    def closeEvent(self, event):
        for worker in list(self._workers):
            worker.wait(5000)
        for coordinator in (self.history, self.profile_state):
            coordinator.teardown()
        super().closeEvent(event)
