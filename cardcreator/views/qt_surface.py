"""Capture surface backed by the on-screen preview."""

from __future__ import annotations

import io
from typing import Any, List

from PIL import Image
from PySide6.QtCore import QBuffer, QIODevice
from loguru import logger

from ..common.errors import CaptureError
from ..controllers.capture_builder import Hotspot
from ..utils.geometry import PixelRect
from ..widgets.scaled_preview import ScaledCardPreview


class QtCardSurface:
    """Adapts :class:`ScaledCardPreview` to the capture builder.

    Hotspot rectangles are reported in the pixels of the last grab, so on a
    high-density screen they are multiplied by the device pixel ratio.
    """

    def __init__(self, preview: ScaledCardPreview):
        self.preview = preview
        self.card = preview.card
        self._pixel_ratio = 1.0

    def surface_state(self) -> Any:
        return self.preview.surface_state()

    def force_unscaled(self) -> None:
        self.preview.force_unscaled()

    def restore_state(self, state: Any) -> None:
        self.preview.restore_state(state)

    def rasterize(self) -> Image.Image:
        pixmap = self.card.grab()
        if pixmap.isNull():
            raise CaptureError("The card surface could not be grabbed")
        self._pixel_ratio = pixmap.devicePixelRatio() or 1.0

        buffer = QBuffer()
        buffer.open(QIODevice.WriteOnly)
        if not pixmap.save(buffer, "PNG"):
            raise CaptureError("The captured card could not be encoded")
        image = Image.open(io.BytesIO(bytes(buffer.data())))
        image.load()
        logger.debug(f"Grabbed card at {image.width}x{image.height} (ratio {self._pixel_ratio})")
        return image

    def hotspots(self) -> List[Hotspot]:
        ratio = self._pixel_ratio
        spots = []
        for url, rect in self.card.hotspot_geometries():
            left, top = rect.x() * ratio, rect.y() * ratio
            spots.append(Hotspot(
                url=url,
                rect=PixelRect(left, top, left + rect.width() * ratio, top + rect.height() * ratio),
            ))
        return spots
