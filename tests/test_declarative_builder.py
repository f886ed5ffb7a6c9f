"""
Declarative builder
===================

Composition rules are checked on the in-memory card document; a couple of
tests render through WeasyPrint and read the PDF back with pypdf.
"""

import io

import pytest
from pypdf import PdfReader

from cardcreator.common.errors import ExportError
from cardcreator.controllers.card_document import ImagePrimitive, ListPrimitive, TextPrimitive
from cardcreator.controllers.declarative_builder import DeclarativeDocumentBuilder
from cardcreator.schemas.layout_schema import CARD_TEMPLATE
from cardcreator.schemas.profile_schema import ProfileRecord
from cardcreator.utils.assets import AssetRegistry
from cardcreator.utils.lazy_weasyprint import LazyWeasyPrint

from .conftest import requires_weasyprint


@pytest.fixture
def builder():
    return DeclarativeDocumentBuilder()


def _find(doc, region_id):
    return [p for p in doc.primitives if p.region_id == region_id]


def _texts(doc, region_id):
    return [p.text for p in _find(doc, region_id) if isinstance(p, TextPrimitive)]


def test_ana_li_card(builder, ana_li):
    doc = builder.compose(ana_li)

    assert doc.width == 1920 and doc.height == 1080
    assert _texts(doc, "name") == ["Ana Li"]
    assert _texts(doc, "core_skills_list") == ["Go", "SQL", "Skill 3"]

    lists = [p for p in _find(doc, "highlights_list") if isinstance(p, ListPrimitive)]
    assert len(lists) == 1 and lists[0].items == ["Shipped v2"]

    pills = _find(doc, "status_pill")
    assert len(pills) == 1 and "Contractor-Status-Pill" in pills[0].source

    assert ("https://linkedin.com/in/anali", CARD_TEMPLATE.link_rect(
        CARD_TEMPLATE.contact_cells(CARD_TEMPLATE.slots("contact", 1)[0])[1])) in doc.links()


def test_linkedin_row_label(builder, ana_li):
    doc = builder.compose(ana_li)
    contact = _texts(doc, "contact")
    assert contact == ["LinkedIn Profile:", "Visit Here"]
    link = next(p for p in _find(doc, "contact") if p.link)
    assert link.underline
    assert link.effective_color == CARD_TEMPLATE.link_color


@pytest.mark.parametrize("highlights, expected", [
    (["", "  "], None),
    (["", "Led team"], ["Led team"]),
    (["A", "", "B"], ["A", "B"]),
])
def test_highlights_block(builder, highlights, expected):
    doc = builder.compose(ProfileRecord(name="X", highlights=highlights))
    if expected is None:
        assert not _find(doc, "highlights_list")
        assert not _find(doc, "highlights_panel")
        assert not _find(doc, "highlights_title")
    else:
        (block,) = _find(doc, "highlights_list")
        assert block.items == expected
        assert block.bullet == "•"


@pytest.mark.parametrize("skills, expected", [
    ([], ["Skill 1", "Skill 2", "Skill 3"]),
    (["React"], ["React", "Skill 2", "Skill 3"]),
    (["React", "Go", "Rust"], ["React", "Go", "Rust"]),
])
def test_core_skills_render_three_lines(builder, skills, expected):
    doc = builder.compose(ProfileRecord(core_skills=skills))
    assert _texts(doc, "core_skills_list") == expected


def test_contact_rows_follow_fixed_order(builder):
    record = ProfileRecord(email="a@b.co", position="Engineer", phone="555", address="Paris")
    doc = builder.compose(record)
    labels = _texts(doc, "contact")[::2]
    assert labels == ["Position:", "Location:", "Phone Number:", "Email:"]
    rows = [p.rect.y for p in _find(doc, "contact")][::2]
    assert rows == sorted(rows)


def test_blank_name_uses_placeholder(builder):
    assert _texts(builder.compose(ProfileRecord()), "name") == ["Candidate Name"]


def test_action_buttons_only_for_present_urls(builder):
    doc = builder.compose(ProfileRecord(resume_url="example.com/cv.pdf"))
    (button,) = _find(doc, "actions")
    assert button.link == "https://example.com/cv.pdf"
    assert "Resume-Button" in button.source

    doc = builder.compose(ProfileRecord(resume_url="https://a.io/cv", portfolio_url="a.io"))
    buttons = _find(doc, "actions")
    assert [b.link for b in buttons] == ["https://a.io/cv", "https://a.io"]
    assert buttons[1].rect.x > buttons[0].rect.x


def test_no_links_without_urls(builder):
    assert builder.compose(ProfileRecord(name="Ana")).links() == []


def test_profile_image_payload(builder, png_data_uri):
    doc = builder.compose(ProfileRecord(profile_image_payload=png_data_uri))
    images = [p for p in _find(doc, "profile_image") if isinstance(p, ImagePrimitive)]
    assert len(images) == 1
    assert images[0].source == png_data_uri
    assert images[0].fit == "cover"


def test_silhouette_when_no_image(builder):
    doc = builder.compose(ProfileRecord())
    (image,) = [p for p in _find(doc, "profile_image") if isinstance(p, ImagePrimitive)]
    assert "silhouette" in image.source
    panel = CARD_TEMPLATE.rect("profile_image")
    assert image.rect.width < panel.width


def test_broken_image_payload_is_a_warning(builder):
    doc = builder.compose(ProfileRecord(profile_image_payload="data:image/png;base64,AAAA"))
    assert any(w.key == "profile_image" for w in doc.warnings)
    (image,) = [p for p in _find(doc, "profile_image") if isinstance(p, ImagePrimitive)]
    assert "silhouette" in image.source


def test_missing_assets_degrade_to_warnings(tmp_path, ana_li):
    builder = DeclarativeDocumentBuilder(AssetRegistry(tmp_path))
    doc = builder.compose(ana_li.model_copy(update={"resume_url": "example.com"}))

    keys = {w.key for w in doc.warnings}
    assert {"logo", "status.contractor", "placeholder.silhouette", "button.resume"} <= keys
    assert not _find(doc, "status_pill")
    assert not _find(doc, "logo")
    assert not _find(doc, "actions")
    assert _texts(doc, "name") == ["Ana Li"]


def test_unknown_placement_draws_no_status_pill(builder):
    record = ProfileRecord.from_form_data({"name": "Ana", "placementType": "Freelancer"})
    doc = builder.compose(record)
    assert not _find(doc, "status_pill")
    assert not any(w.key.startswith("status") for w in doc.warnings)


@pytest.mark.parametrize("placement, asset", [
    ("Direct Placement", "Direct-Placement-Status-Pill"),
    ("contract-to-hire", "Contract-to-Hire-Status-Pill"),
])
def test_status_pill_follows_placement(builder, placement, asset):
    (pill,) = _find(builder.compose(ProfileRecord(placement_type=placement)), "status_pill")
    assert asset in pill.source


def test_missing_fonts_are_not_warnings(tmp_path, ana_li):
    doc = DeclarativeDocumentBuilder(AssetRegistry(tmp_path)).compose(ana_li)
    assert doc.fonts == {}
    assert not any(w.key.startswith("font.") for w in doc.warnings)

    doc = DeclarativeDocumentBuilder().compose(ana_li)
    assert not any(w.key.startswith("font.") for w in doc.warnings)
    assert doc.warnings == []


def test_compose_does_not_mutate_record(builder, ana_li):
    before = ana_li.model_dump()
    builder.compose(ana_li)
    assert ana_li.model_dump() == before


def test_html_positions_use_points(builder, ana_li):
    html = builder.render_html(builder.compose(ana_li))
    assert "size: 1920.00pt 1080.00pt" in html
    assert 'href="https://linkedin.com/in/anali"' in html
    assert "Skill 3" in html


def test_render_pdf_without_weasyprint(builder, ana_li, monkeypatch):
    missing = LazyWeasyPrint()
    missing._fail("Import error: test")

    monkeypatch.setattr("cardcreator.controllers.declarative_builder.get_weasyprint", lambda: missing)
    with pytest.raises(ExportError) as excinfo:
        builder.build(ana_li)
    assert "WeasyPrint" in excinfo.value.user_message


@requires_weasyprint
def test_pdf_page_and_link(builder, ana_li):
    export = builder.build(ana_li)
    assert export.backend == "declarative"

    page = PdfReader(io.BytesIO(export.pdf)).pages[0]
    assert float(page.mediabox.width) == pytest.approx(1920, abs=1)
    assert float(page.mediabox.height) == pytest.approx(1080, abs=1)

    uris = [a.get_object()["/A"]["/URI"] for a in page.get("/Annots", [])
            if a.get_object().get("/Subtype") == "/Link" and "/A" in a.get_object()]
    assert "https://linkedin.com/in/anali" in uris
    assert "Ana Li" in page.extract_text()
