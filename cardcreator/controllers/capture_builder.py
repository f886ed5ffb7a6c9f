"""
Capture-and-Map Document Builder
================================

Exports what the live preview shows: the card surface is rendered at 1:1,
rasterized, and placed as the full-page background of a PDF. The links baked
into the flat image are rebuilt as invisible link annotations whose
rectangles are projected from bitmap pixels to page units.

The surface is only touched through :class:`CaptureSurface`, so this module
never imports Qt and can be exercised with a fake surface.
"""

from __future__ import annotations

import io
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Protocol, runtime_checkable

from loguru import logger
from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from ..common.errors import CaptureError, ExportError
from ..schemas.layout_schema import CANVAS
from ..schemas.profile_schema import ProfileRecord, normalize_url
from ..utils.geometry import PixelRect, Rect, Size, map_bitmap_rect_to_document
from .card_document import CardExport, ExportWarning

# Record fields rendered as links on the card
LINK_FIELDS = ("linkedin_url", "resume_url", "portfolio_url")


@dataclass(frozen=True, slots=True)
class Hotspot:
    """A link on the surface, measured in captured-bitmap pixels."""

    url: str
    rect: PixelRect
    region_id: str = ""


@runtime_checkable
class CaptureSurface(Protocol):
    """What the builder needs from an on-screen card surface."""

    def surface_state(self) -> Any:
        """Opaque token describing the current style/transform."""

    def force_unscaled(self) -> None:
        """Render the card at 1:1 (full virtual resolution)."""

    def restore_state(self, state: Any) -> None:
        """Put back the state returned by :meth:`surface_state`."""

    def rasterize(self) -> Image.Image:
        """Capture the card surface as a bitmap."""

    def hotspots(self) -> List[Hotspot]:
        """Link hotspots relative to the captured bitmap's origin."""


@dataclass(slots=True)
class CaptureSnapshot:
    image: Image.Image
    hotspots: List[Hotspot] = field(default_factory=list)

    @property
    def bitmap_size(self) -> Size:
        width, height = self.image.size
        return Size(width, height)


@dataclass(frozen=True, slots=True)
class LinkAnnotation:
    url: str
    rect: Rect


@contextmanager
def unscaled_surface(surface: CaptureSurface) -> Iterator[CaptureSurface]:
    """Force the surface to 1:1 for the duration of the block, then restore it.

    Restoration happens on every exit path, including exceptions.
    """
    state = surface.surface_state()
    try:
        surface.force_unscaled()
        yield surface
    finally:
        try:
            surface.restore_state(state)
        except Exception as exc:
            logger.error(f"Failed to restore the preview state after capture: {exc}")


class CaptureAndMapDocumentBuilder:
    """Live surface + profile record -> flattened PDF with clickable links."""

    backend_name = "capture"

    def __init__(self, document_size: Size = CANVAS, image_format: str = "PNG") -> None:
        if not document_size.is_positive:
            raise ValueError("document size must be positive")
        self.document_size = document_size
        self.image_format = image_format

    # ------------------------------------------------------------------
    # Capture (GUI thread)
    # ------------------------------------------------------------------
    def capture(self, surface: CaptureSurface) -> CaptureSnapshot:
        """Rasterize the surface at 1:1 and measure its link hotspots."""
        with unscaled_surface(surface):
            try:
                image = surface.rasterize()
                hotspots = list(surface.hotspots())
            except CaptureError:
                raise
            except Exception as exc:
                logger.error(f"Card capture failed: {exc}")
                raise CaptureError(str(exc)) from exc

        if image is None or image.width <= 0 or image.height <= 0:
            raise CaptureError("Capture produced an empty bitmap")

        logger.debug(f"Captured {image.width}x{image.height} bitmap with {len(hotspots)} hotspot(s)")
        return CaptureSnapshot(image=image, hotspots=hotspots)

    # ------------------------------------------------------------------
    # Assembly (any thread)
    # ------------------------------------------------------------------
    def map_hotspots(self, snapshot: CaptureSnapshot) -> List[LinkAnnotation]:
        bitmap = snapshot.bitmap_size
        annotations = []
        for hotspot in snapshot.hotspots:
            if not hotspot.url or hotspot.rect.width <= 0 or hotspot.rect.height <= 0:
                continue
            annotations.append(LinkAnnotation(
                url=normalize_url(hotspot.url),
                rect=map_bitmap_rect_to_document(hotspot.rect, bitmap, self.document_size),
            ))
        return annotations

    def assemble(self, snapshot: CaptureSnapshot, record: Optional[ProfileRecord] = None) -> bytes:
        """Background image + invisible link rectangles -> PDF bytes."""
        doc_w, doc_h = self.document_size.width, self.document_size.height
        annotations = self.map_hotspots(snapshot)

        image = snapshot.image
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGB")
        encoded = io.BytesIO()
        image.save(encoded, format=self.image_format)
        encoded.seek(0)

        buffer = io.BytesIO()
        pdf = pdf_canvas.Canvas(buffer, pagesize=(doc_w, doc_h), pageCompression=1)
        if record is not None:
            pdf.setTitle(f"{record.name or 'Candidate'} card")
        pdf.setCreator("candidate-card-creator")
        pdf.drawImage(ImageReader(encoded), 0, 0, width=doc_w, height=doc_h)
        for annotation in annotations:
            r = annotation.rect
            pdf.linkURL(annotation.url, (r.x, r.y, r.right, r.bottom), relative=0, thickness=0)
        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def missing_hotspots(self, snapshot: CaptureSnapshot, record: ProfileRecord) -> List[ExportWarning]:
        """One warning per record URL that has no clickable area on the capture."""
        captured = {annotation.url for annotation in self.map_hotspots(snapshot)}
        warnings = []
        for field_name in LINK_FIELDS:
            url = normalize_url(getattr(record, field_name))
            if url and url not in captured:
                logger.warning(f"No hotspot for {field_name} ({url}) on the captured surface")
                warnings.append(ExportWarning(f"hotspot.{field_name}",
                                              f"The {url} link is not clickable in the export"))
        return warnings

    def build(self, snapshot: CaptureSnapshot, record: ProfileRecord) -> CardExport:
        """Assemble a captured snapshot into the exported card."""
        try:
            pdf = self.assemble(snapshot, record)
        except Exception as exc:
            logger.error(f"Could not assemble the captured card: {exc}")
            raise ExportError(str(exc)) from exc

        warnings = self.missing_hotspots(snapshot, record)
        logger.info(f"Capture export assembled ({len(pdf)} bytes, {len(snapshot.hotspots)} link(s))")
        return CardExport(pdf=pdf, backend=self.backend_name, warnings=warnings)

    def render(self, record: ProfileRecord, surface: Optional[CaptureSurface] = None) -> CardExport:
        """Capture then assemble in one call (single-threaded callers)."""
        if surface is None:
            raise CaptureError("No live card surface to capture")
        return self.build(self.capture(surface), record)
