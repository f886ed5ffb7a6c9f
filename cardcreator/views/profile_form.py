"""
Profile Form
============

Editing panel for the card fields. Every user edit is emitted as
``field_changed(field_name, value)``; the window routes it to
``ProfileStateCoordinator.update_field`` and feeds the resulting record back
through :meth:`ProfileFormPanel.set_record`.

Only user-driven signals (``textEdited``, ``activated``) are listened to, so
syncing widgets from a record never echoes back as an edit.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QComboBox, QFileDialog, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QLineEdit,
    QMessageBox, QPushButton, QSizePolicy, QVBoxLayout, QWidget
)
from loguru import logger

from ..common.errors import InputValidationError
from ..schemas.profile_schema import CORE_SKILL_SLOTS, PlacementType, ProfileRecord
from ..utils.assets import load_image_file

# (field, label, placeholder) in form order
TEXT_FIELDS = (
    ("name", "Name:", "Full name"),
    ("position", "Position:", "e.g. Senior Backend Engineer"),
    ("address", "Location:", "City, Country"),
    ("phone", "Phone:", "+1 555 0100"),
    ("email", "Email:", "name@example.com"),
)
LINK_FIELDS = (
    ("linkedin_url", "LinkedIn:", "linkedin.com/in/…"),
    ("resume_url", "Resume link:", "https://…"),
    ("portfolio_url", "Portfolio link:", "https://…"),
)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.webp *.svg)"


def _form_layout() -> QFormLayout:
    layout = QFormLayout()
    layout.setFieldGrowthPolicy(QFormLayout.FieldGrowthPolicy.ExpandingFieldsGrow)
    layout.setFormAlignment(Qt.AlignLeft | Qt.AlignTop)
    layout.setLabelAlignment(Qt.AlignLeft | Qt.AlignVCenter)
    layout.setHorizontalSpacing(12)
    layout.setVerticalSpacing(8)
    return layout


def _sync_text(edit: QLineEdit, value: str) -> None:
    # The record trims; leave trailing spaces the user is still typing.
    if edit.text().strip() != value:
        edit.setText(value)


class TextFieldsSection(QGroupBox):
    """Line edits for plain text and link fields."""

    def __init__(self, title: str, fields, panel: 'ProfileFormPanel', parent=None):
        super().__init__(title, parent)
        self.edits: Dict[str, QLineEdit] = {}
        layout = _form_layout()
        self.setContentsMargins(12, 12, 12, 12)
        for field_name, label, placeholder in fields:
            edit = QLineEdit()
            edit.setObjectName(field_name)
            edit.setPlaceholderText(placeholder)
            edit.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
            edit.textEdited.connect(lambda text, name=field_name: panel.field_changed.emit(name, text))
            layout.addRow(label, edit)
            self.edits[field_name] = edit
        self.setLayout(layout)

    def set_record(self, record: ProfileRecord) -> None:
        for field_name, edit in self.edits.items():
            _sync_text(edit, getattr(record, field_name))


class HighlightsSection(QGroupBox):
    """One row per highlight, with add and remove buttons."""

    def __init__(self, panel: 'ProfileFormPanel', parent=None):
        super().__init__("Highlights", parent)
        self.panel = panel
        self.rows: List[QWidget] = []
        self.edits: List[QLineEdit] = []

        self.rows_layout = QVBoxLayout()
        self.rows_layout.setSpacing(6)
        self.add_button = QPushButton("+ Add highlight")
        self.add_button.clicked.connect(self.add_highlight)

        layout = QVBoxLayout()
        layout.addLayout(self.rows_layout)
        layout.addWidget(self.add_button, 0, Qt.AlignLeft)
        self.setLayout(layout)
        self._rebuild([""])

    def values(self) -> List[str]:
        return [edit.text() for edit in self.edits]

    def _emit(self) -> None:
        self.panel.field_changed.emit("highlights", self.values())

    def _rebuild(self, items: List[str]) -> None:
        for row in self.rows:
            self.rows_layout.removeWidget(row)
            row.deleteLater()
        self.rows, self.edits = [], []
        for text in items:
            self._append_row(text)

    def _append_row(self, text: str) -> QLineEdit:
        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        edit = QLineEdit(text)
        edit.setPlaceholderText("Achievement or highlight")
        edit.textEdited.connect(self._emit)
        remove = QPushButton("Remove")
        remove.clicked.connect(lambda: self.remove_highlight(self.edits.index(edit)))
        row_layout.addWidget(edit, 1)
        row_layout.addWidget(remove)
        self.rows_layout.addWidget(row)
        self.rows.append(row)
        self.edits.append(edit)
        return edit

    def add_highlight(self) -> None:
        self._append_row("").setFocus()
        self._emit()

    def remove_highlight(self, index: int) -> None:
        if not 0 <= index < len(self.rows):
            return
        row = self.rows.pop(index)
        self.edits.pop(index)
        self.rows_layout.removeWidget(row)
        row.deleteLater()
        self._emit()

    def set_record(self, record: ProfileRecord) -> None:
        if len(record.highlights) != len(self.edits):
            self._rebuild(record.highlights)
            return
        for edit, text in zip(self.edits, record.highlights):
            # Highlights keep their spacing, so compare exactly.
            if edit.text() != text:
                edit.setText(text)


class SkillsSection(QGroupBox):
    """The three core-skill slots."""

    def __init__(self, panel: 'ProfileFormPanel', parent=None):
        super().__init__("Core Skills", parent)
        self.edits: List[QLineEdit] = []
        layout = _form_layout()
        for index in range(CORE_SKILL_SLOTS):
            edit = QLineEdit()
            edit.setPlaceholderText(f"Skill {index + 1}")
            edit.textEdited.connect(
                lambda _text: panel.field_changed.emit("core_skills", [e.text() for e in self.edits])
            )
            layout.addRow(f"Skill {index + 1}:", edit)
            self.edits.append(edit)
        self.setLayout(layout)

    def set_record(self, record: ProfileRecord) -> None:
        for edit, skill in zip(self.edits, record.core_skills):
            _sync_text(edit, skill)


class StatusSection(QGroupBox):
    """Placement type and profile photo."""

    def __init__(self, panel: 'ProfileFormPanel', parent=None):
        super().__init__("Status & Photo", parent)
        self.panel = panel
        layout = _form_layout()

        self.placement_combo = QComboBox()
        for placement in PlacementType:
            self.placement_combo.addItem(placement.value, placement.value)
        self.placement_combo.activated.connect(
            lambda index: panel.field_changed.emit("placement_type", self.placement_combo.itemData(index))
        )
        layout.addRow("Placement:", self.placement_combo)

        self.photo_label = QLabel()
        self.photo_label.setStyleSheet("color: #6c757d; font-size: 11px;")
        self.choose_photo_button = QPushButton("Choose photo…")
        self.choose_photo_button.clicked.connect(self.choose_photo)
        self.remove_photo_button = QPushButton("Remove photo")
        self.remove_photo_button.clicked.connect(lambda: panel.field_changed.emit("profile_image_payload", None))
        photo_row = QHBoxLayout()
        photo_row.addWidget(self.choose_photo_button)
        photo_row.addWidget(self.remove_photo_button)
        photo_row.addWidget(self.photo_label, 1)
        layout.addRow("Photo:", photo_row)

        self.setLayout(layout)

    def choose_photo(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose photo", "", IMAGE_FILTER)
        if path:
            self.set_photo_file(path)

    def set_photo_file(self, path) -> bool:
        try:
            payload = load_image_file(path)
        except InputValidationError as e:
            logger.warning(f"Photo rejected: {e}")
            QMessageBox.warning(self, "Photo", e.user_message)
            return False
        self.panel.field_changed.emit("profile_image_payload", payload)
        return True

    def set_record(self, record: ProfileRecord) -> None:
        placement = record.placement_type
        index = -1 if placement is None else self.placement_combo.findData(placement.value)
        if self.placement_combo.currentIndex() != index:
            self.placement_combo.setCurrentIndex(index)

        has_photo = record.profile_image_payload is not None
        self.photo_label.setText("Photo attached" if has_photo else "No photo")
        self.remove_photo_button.setEnabled(has_photo)


class ProfileFormPanel(QWidget):
    """Form sections for every card field."""

    field_changed = Signal(str, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.details_section = TextFieldsSection("Candidate", TEXT_FIELDS, self)
        self.links_section = TextFieldsSection("Links", LINK_FIELDS, self)
        self.highlights_section = HighlightsSection(self)
        self.skills_section = SkillsSection(self)
        self.status_section = StatusSection(self)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(10)
        for section in self.sections:
            layout.addWidget(section)
        layout.addStretch()

        self.set_record(ProfileRecord.new())

    @property
    def sections(self):
        return (self.details_section, self.links_section, self.highlights_section,
                self.skills_section, self.status_section)

    def line_edit(self, field_name: str) -> Optional[QLineEdit]:
        for section in (self.details_section, self.links_section):
            if field_name in section.edits:
                return section.edits[field_name]
        return None

    def set_record(self, record: ProfileRecord) -> None:
        for section in self.sections:
            section.set_record(record)
