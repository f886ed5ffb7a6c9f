"""
Declarative Document Builder
============================

Builds the exported card straight from the profile record and the layout
template, without looking at any rendered pixels. The intermediate
:class:`CardDocument` is rendered to HTML with Jinja2 and to PDF with
WeasyPrint (1 CSS ``pt`` = 1 document unit, page 1920x1080).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader
from loguru import logger

from ..common.errors import AssetResolutionError
from ..schemas.layout_schema import CANVAS, CARD_TEMPLATE, LayoutTemplate
from ..schemas.profile_schema import ProfileRecord, normalize_url
from ..utils.assets import FONT_KEYS, AssetRegistry, decode_data_uri
from ..utils.geometry import Rect
from ..utils.lazy_weasyprint import get_weasyprint
from .card_document import (
    BoxPrimitive,
    CardDocument,
    CardExport,
    ImagePrimitive,
    ListPrimitive,
    TextPrimitive,
)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

# @font-face declarations, by asset key
FONT_FACES = {
    "font.heading": ("Termina", 400),
    "font.body": ("Space Grotesk", 400),
    "font.body_bold": ("Space Grotesk", 700),
}


def _pt(value: float) -> str:
    return f"{value:.2f}pt"


def _centered(rect: Rect, fraction: float) -> Rect:
    side = min(rect.width, rect.height) * fraction
    return Rect(rect.x + (rect.width - side) / 2, rect.y + (rect.height - side) / 2, side, side)


class DeclarativeDocumentBuilder:
    """Profile record + layout template -> card document -> PDF bytes."""

    backend_name = "declarative"

    def __init__(
        self,
        assets: Optional[AssetRegistry] = None,
        template: LayoutTemplate = CARD_TEMPLATE,
    ) -> None:
        self.assets = assets or AssetRegistry()
        self.template = template
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=True,
        )
        self.jinja_env.filters['pt'] = _pt

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def compose(self, record: ProfileRecord, *, include_fonts: bool = True) -> CardDocument:
        """Lay every non-empty binding out at its region rectangle.

        The on-screen card reuses this layout with ``include_fonts=False``;
        it registers fonts with Qt once instead.
        """
        tpl = self.template
        doc = CardDocument(
            width=CANVAS.width,
            height=CANVAS.height,
            background=tpl.page_background,
            template_version=tpl.version,
            title=f"{record.name or 'Candidate'} card",
        )

        if include_fonts:
            self._add_fonts(doc)
        self._add_profile_image(doc, record)
        self._add_status_pill(doc, record)
        self._add_asset_image(doc, "logo", "logo", fit="contain", align="left")

        doc.add(TextPrimitive("name", tpl.rect("name"), record.name or tpl.name_placeholder,
                              tpl.region("name").style))

        self._add_contact_rows(doc, record)
        self._add_action_buttons(doc, record)
        self._add_core_skills(doc, record)
        self._add_highlights(doc, record)

        logger.debug(
            f"Composed card ({len(doc.primitives)} primitives, {len(doc.warnings)} warnings)"
        )
        return doc

    def _add_fonts(self, doc: CardDocument) -> None:
        for key in FONT_KEYS:
            try:
                doc.fonts[key] = self.assets.uri(key)
            except AssetResolutionError:
                # Optional; the stylesheet names system fallbacks
                logger.debug(f"Font {key} not bundled, using system fallback")

    def _add_asset_image(self, doc: CardDocument, region_id: str, key: str, *,
                         rect: Optional[Rect] = None, fit: str = "contain",
                         align: str = "center", link: Optional[str] = None) -> bool:
        try:
            source = self.assets.uri(key)
        except AssetResolutionError as exc:
            doc.warn(exc)
            return False
        doc.add(ImagePrimitive(region_id, rect or self.template.rect(region_id), source,
                               fit=fit, align=align, link=link))
        return True

    def _add_profile_image(self, doc: CardDocument, record: ProfileRecord) -> None:
        region = self.template.region("profile_image")
        rect = self.template.rect("profile_image")
        doc.add(BoxPrimitive("profile_image", rect, region.style.background or "#1F2937"))

        if record.profile_image_payload:
            try:
                decode_data_uri(record.profile_image_payload)
            except AssetResolutionError as exc:
                doc.warn(exc)
            else:
                doc.add(ImagePrimitive("profile_image", rect, record.profile_image_payload, fit="cover"))
                return

        self._add_asset_image(doc, "profile_image", "placeholder.silhouette",
                              rect=_centered(rect, 0.4))

    def _add_status_pill(self, doc: CardDocument, record: ProfileRecord) -> None:
        if record.placement_type is None:
            return
        self._add_asset_image(doc, "status_pill", record.placement_type.asset_key, align="right")

    def _add_contact_rows(self, doc: CardDocument, record: ProfileRecord) -> None:
        tpl = self.template
        style = tpl.region("contact").style
        rows = [(field_name, label) for field_name, label in tpl.contact_fields
                if getattr(record, field_name)]
        for (field_name, label), row in zip(rows, tpl.slots("contact", len(rows))):
            label_cell, value_cell = tpl.contact_cells(row)
            doc.add(TextPrimitive("contact", label_cell, label, style, weight=700))
            if field_name == "linkedin_url":
                doc.add(TextPrimitive(
                    "contact", tpl.link_rect(value_cell), tpl.link_label, style,
                    color=tpl.link_color, underline=tpl.link_underline,
                    link=normalize_url(record.linkedin_url),
                ))
            else:
                doc.add(TextPrimitive("contact", value_cell, getattr(record, field_name), style))

    def _add_action_buttons(self, doc: CardDocument, record: ProfileRecord) -> None:
        tpl = self.template
        actions = [(field_name, key) for field_name, key in tpl.action_fields
                   if getattr(record, field_name)]
        for (field_name, key), slot in zip(actions, tpl.slots("actions", len(actions))):
            self._add_asset_image(doc, "actions", key, rect=slot,
                                  link=normalize_url(getattr(record, field_name)))

    def _add_core_skills(self, doc: CardDocument, record: ProfileRecord) -> None:
        tpl = self.template
        panel = tpl.region("core_skills_panel")
        doc.add(BoxPrimitive("core_skills_panel", tpl.rect("core_skills_panel"), panel.style.background))
        doc.add(TextPrimitive("core_skills_title", tpl.rect("core_skills_title"), tpl.skills_title,
                              tpl.region("core_skills_title").style))
        style = tpl.region("core_skills_list").style
        for label, slot in zip(record.skill_labels, tpl.slots("core_skills_list", len(record.core_skills))):
            doc.add(TextPrimitive("core_skills_list", slot, label, style))

    def _add_highlights(self, doc: CardDocument, record: ProfileRecord) -> None:
        items = record.visible_highlights
        if not items:
            return
        tpl = self.template
        panel = tpl.region("highlights_panel")
        doc.add(BoxPrimitive("highlights_panel", tpl.rect("highlights_panel"), panel.style.background))
        doc.add(TextPrimitive("highlights_title", tpl.rect("highlights_title"), tpl.highlights_title,
                              tpl.region("highlights_title").style))
        doc.add(ListPrimitive("highlights_list", tpl.rect("highlights_list"), items,
                              tpl.region("highlights_list").style,
                              bullet=tpl.bullet, bullet_color=tpl.bullet_color))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_html(self, doc: CardDocument) -> str:
        font_faces = [
            {"family": FONT_FACES[key][0], "weight": FONT_FACES[key][1], "src": uri}
            for key, uri in doc.fonts.items()
        ]
        return self.jinja_env.get_template("card.html").render(doc=doc, font_faces=font_faces)

    def render_pdf(self, doc: CardDocument) -> bytes:
        return get_weasyprint().write_pdf(self.render_html(doc), base_url=str(self.assets.assets_dir))

    def build(self, record: ProfileRecord) -> CardExport:
        """Compose and render ``record``; warnings ride along with the bytes."""
        doc = self.compose(record)
        pdf = self.render_pdf(doc)
        logger.info(
            f"Declarative export rendered ({len(pdf)} bytes, {len(doc.links())} links, "
            f"{len(doc.warnings)} warnings)"
        )
        return CardExport(pdf=pdf, backend=self.backend_name, warnings=list(doc.warnings))

    def render(self, record: ProfileRecord, surface=None) -> CardExport:
        # No live surface needed; the record alone defines the card.
        return self.build(record)
