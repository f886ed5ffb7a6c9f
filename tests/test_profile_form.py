"""
Profile form panel
==================

Edits go through the window's state coordinator and come back to the
preview card; runs on the offscreen platform.
"""

import pytest

pytest.importorskip("PySide6.QtWidgets")

from PIL import Image

from cardcreator.config import CardCreatorConfig
from cardcreator.controllers.export_manager import ExportManager
from cardcreator.controllers.main_window import ProfileStateCoordinator
from cardcreator.schemas.profile_schema import PlacementType, ProfileRecord
from cardcreator.services.autofill import ResumeAutofillService
from cardcreator.views.profile_form import ProfileFormPanel


@pytest.fixture
def window(qapp, history):
    from cardcreator.views.main_window import MainWindow

    window = MainWindow(
        CardCreatorConfig(resize_debounce_ms=0),
        export_manager=ExportManager(history=history),
        autofill_service=ResumeAutofillService(client=object()),
    )
    yield window
    window.close()


@pytest.fixture
def bound_form(qapp):
    state = ProfileStateCoordinator()
    form = ProfileFormPanel()
    form.field_changed.connect(state.update_field)
    state.subscribe(form.set_record)
    return form, state


def _type(edit, text):
    edit.setText(text)
    edit.textEdited.emit(text)


def test_editing_name_updates_preview(window):
    _type(window.form.line_edit("name"), "Ana Li")
    assert window.profile_state.record.name == "Ana Li"
    assert window.preview.card.record.name == "Ana Li"


def test_trailing_space_survives_sync(bound_form):
    form, state = bound_form
    edit = form.line_edit("position")
    _type(edit, "Senior ")
    assert state.record.position == "Senior"
    assert edit.text() == "Senior "


def test_link_field_edit(bound_form):
    form, state = bound_form
    _type(form.line_edit("resume_url"), "example.com/cv.pdf")
    assert state.record.resume_url == "example.com/cv.pdf"


def test_highlights_add_edit_remove(bound_form):
    form, state = bound_form
    section = form.highlights_section
    assert len(section.edits) == 1

    _type(section.edits[0], "Shipped v2")
    section.add_highlight()
    _type(section.edits[1], "Led team")
    assert state.record.highlights == ["Shipped v2", "Led team"]

    section.remove_highlight(0)
    assert state.record.highlights == ["Led team"]
    assert section.values() == ["Led team"]

    section.remove_highlight(0)
    assert state.record.highlights == [""]
    assert len(section.edits) == 1


def test_core_skills_emit_all_slots(bound_form):
    form, state = bound_form
    _type(form.skills_section.edits[1], "SQL")
    assert state.record.core_skills == ["", "SQL", ""]


def test_placement_combo(bound_form):
    form, state = bound_form
    combo = form.status_section.placement_combo
    assert combo.currentText() == "Contractor"

    index = combo.findText("Contract to Hire")
    combo.setCurrentIndex(index)
    combo.activated.emit(index)
    assert state.record.placement_type is PlacementType.CONTRACT_TO_HIRE

    state.load(ProfileRecord(placement_type="Freelancer"))
    assert combo.currentIndex() == -1


def test_photo_picker_and_removal(bound_form, tmp_path):
    form, state = bound_form
    path = tmp_path / "me.png"
    Image.new("RGB", (8, 8), "#00FF00").save(path)

    assert form.status_section.set_photo_file(path)
    assert state.record.profile_image_payload.startswith("data:image/png;base64,")
    assert form.status_section.remove_photo_button.isEnabled()

    form.status_section.remove_photo_button.click()
    assert state.record.profile_image_payload is None
    assert form.status_section.photo_label.text() == "No photo"


def test_loaded_record_fills_form(bound_form, ana_li):
    form, state = bound_form
    state.load(ana_li)
    assert form.line_edit("name").text() == "Ana Li"
    assert form.line_edit("linkedin_url").text() == "linkedin.com/in/anali"
    assert [e.text() for e in form.skills_section.edits] == ["Go", "SQL", ""]
    assert form.highlights_section.values() == ["Shipped v2"]
