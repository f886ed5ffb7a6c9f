"""
Card Widget
===========

Interactive renderer: draws the card at 1:1 canvas coordinates (1920x1080
widget pixels). It lays out the same :class:`CardDocument` the declarative
exporter renders, so region rectangles are identical on screen and on paper.
Scaling is left to the hosting view.
"""

from __future__ import annotations

import html
from typing import List, Optional, Tuple

from PySide6.QtCore import QRect, QSize, Qt, QUrl, Signal
from PySide6.QtGui import QDesktopServices, QFont, QFontDatabase, QImage, QPixmap
from PySide6.QtWidgets import QFrame, QLabel, QWidget
from loguru import logger

from ..common.errors import AssetResolutionError
from ..controllers.card_document import (
    BoxPrimitive,
    CardDocument,
    ImagePrimitive,
    ListPrimitive,
    TextPrimitive,
)
from ..controllers.declarative_builder import DeclarativeDocumentBuilder
from ..schemas.layout_schema import CANVAS
from ..schemas.profile_schema import ProfileRecord
from ..utils.assets import FONT_KEYS, AssetRegistry, decode_data_uri
from ..utils.geometry import Rect

LINK_PROPERTY = "pdf_link_url"

_ALIGN = {
    "left": Qt.AlignLeft | Qt.AlignVCenter,
    "center": Qt.AlignCenter,
    "right": Qt.AlignRight | Qt.AlignVCenter,
}

_registered_fonts: set = set()


def _qrect(rect: Rect) -> QRect:
    return QRect(round(rect.x), round(rect.y), round(rect.width), round(rect.height))


def _register_fonts(assets: AssetRegistry) -> None:
    for key in FONT_KEYS:
        if key in _registered_fonts:
            continue
        try:
            path = assets.resolve(key)
        except AssetResolutionError as exc:
            logger.debug(f"Font not registered: {exc}")
            continue
        if QFontDatabase.addApplicationFont(str(path)) < 0:
            logger.warning(f"Qt rejected font file {path.name}")
            continue
        _registered_fonts.add(key)


def _read_image(source: str) -> QImage:
    if source.startswith("data:"):
        _, raw = decode_data_uri(source)
        return QImage.fromData(raw)
    return QImage(QUrl(source).toLocalFile())


def _fit_pixmap(image: QImage, size: QSize, fit: str) -> QPixmap:
    if fit == "cover":
        scaled = image.scaled(size, Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation)
        x = max(0, (scaled.width() - size.width()) // 2)
        y = max(0, (scaled.height() - size.height()) // 2)
        scaled = scaled.copy(x, y, size.width(), size.height())
    else:
        scaled = image.scaled(size, Qt.KeepAspectRatio, Qt.SmoothTransformation)
    return QPixmap.fromImage(scaled)


class LinkLabel(QLabel):
    """Label that opens its target when clicked and is exported as a hotspot."""

    def __init__(self, url: str, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setProperty(LINK_PROPERTY, url)
        self.setCursor(Qt.PointingHandCursor)
        self.setToolTip(url)

    @property
    def url(self) -> str:
        return self.property(LINK_PROPERTY) or ""

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton and self.url:
            QDesktopServices.openUrl(QUrl(self.url))
        super().mouseReleaseEvent(event)


class CardWidget(QWidget):
    """Fixed-size card surface rebuilt from a profile record."""

    card_rendered = Signal(object)    # CardDocument

    def __init__(self, composer: Optional[DeclarativeDocumentBuilder] = None, parent=None):
        super().__init__(parent)
        self.composer = composer or DeclarativeDocumentBuilder()
        self.template = self.composer.template
        self._record = ProfileRecord.new()
        self._document: Optional[CardDocument] = None

        self.setFixedSize(int(CANVAS.width), int(CANVAS.height))
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setObjectName("card")
        self.setStyleSheet(f"#card {{ background: {self.template.page_background}; }}")

        _register_fonts(self.composer.assets)
        self.set_record(self._record)

    @property
    def record(self) -> ProfileRecord:
        return self._record

    @property
    def document(self) -> Optional[CardDocument]:
        return self._document

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def set_record(self, record: ProfileRecord) -> None:
        """Rebuild every child from ``record``."""
        self._record = record
        doc = self.composer.compose(record, include_fonts=False)
        self._clear()
        for primitive in doc.primitives:
            widget = self._build(primitive)
            if widget is not None:
                widget.setGeometry(_qrect(primitive.rect))
                widget.show()
        if record.is_empty:
            self._add_empty_hint()
        self._document = doc
        self.card_rendered.emit(doc)

    def _clear(self) -> None:
        for child in self.findChildren(QWidget, "", Qt.FindDirectChildrenOnly):
            child.hide()
            child.deleteLater()

    def _label(self, link: Optional[str]) -> QLabel:
        label = LinkLabel(link, self) if link else QLabel(self)
        label.setAttribute(Qt.WA_TranslucentBackground, True)
        return label

    def _build(self, primitive) -> Optional[QWidget]:
        if isinstance(primitive, BoxPrimitive):
            frame = QFrame(self)
            frame.setStyleSheet(f"background: {primitive.background}; border: none;")
            return frame
        if isinstance(primitive, TextPrimitive):
            return self._build_text(primitive)
        if isinstance(primitive, ImagePrimitive):
            return self._build_image(primitive)
        if isinstance(primitive, ListPrimitive):
            return self._build_list(primitive)
        logger.warning(f"Unsupported card primitive {type(primitive).__name__}")
        return None

    def _font(self, style, weight: int, underline: bool = False) -> QFont:
        font = QFont(style.font_family or "Space Grotesk")
        font.setPixelSize(max(1, round(style.font_size)))
        font.setBold(weight >= 700)
        font.setUnderline(underline)
        return font

    def _build_text(self, p: TextPrimitive) -> QLabel:
        label = self._label(p.link)
        label.setText(p.text)
        label.setFont(self._font(p.style, p.effective_weight, p.underline))
        label.setStyleSheet(f"color: {p.effective_color}; background: transparent;")
        label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        label.setWordWrap(False)
        return label

    def _build_image(self, p: ImagePrimitive) -> Optional[QLabel]:
        try:
            image = _read_image(p.source)
        except AssetResolutionError as exc:
            logger.warning(f"Card image omitted: {exc}")
            return None
        if image.isNull():
            logger.warning(f"Card image omitted: {p.region_id} could not be decoded")
            return None
        label = self._label(p.link)
        size = _qrect(p.rect).size()
        label.setPixmap(_fit_pixmap(image, size, p.fit))
        label.setAlignment(_ALIGN.get(p.align, Qt.AlignCenter))
        return label

    def _build_list(self, p: ListPrimitive) -> QLabel:
        label = self._label(p.link)
        rows = "".join(
            f'<tr><td style="color: {p.bullet_color}; padding-right: 12px;">{html.escape(p.bullet)}</td>'
            f'<td style="padding-bottom: 10px;">{html.escape(item)}</td></tr>'
            for item in p.items
        )
        label.setTextFormat(Qt.RichText)
        label.setText(f"<table cellspacing='0' cellpadding='0'>{rows}</table>")
        label.setFont(self._font(p.style, p.style.weight))
        label.setStyleSheet(f"color: {p.style.color}; background: transparent;")
        label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        label.setWordWrap(True)
        return label

    def _add_empty_hint(self) -> None:
        region = self.template.region("contact")
        hint = QLabel(self.template.empty_hint, self)
        hint.setObjectName("emptyHint")
        hint.setFont(self._font(region.style, 400))
        hint.setStyleSheet("color: #9CA3AF; background: transparent;")
        hint.setAlignment(Qt.AlignCenter)
        hint.setWordWrap(True)
        hint.setGeometry(_qrect(self.template.rect("contact")))
        hint.show()

    # ------------------------------------------------------------------
    # Hotspots
    # ------------------------------------------------------------------
    def link_labels(self) -> List[LinkLabel]:
        return [
            child for child in self.findChildren(LinkLabel, "", Qt.FindDirectChildrenOnly)
            if child.isVisibleTo(self) and child.url
        ]

    def hotspot_geometries(self) -> List[Tuple[str, QRect]]:
        """(url, rect) of every link, in card widget pixels."""
        return [(label.url, label.geometry()) for label in self.link_labels()]
