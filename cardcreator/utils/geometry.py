"""
Geometry helpers
================

Rectangles in the two coordinate systems the exporters deal with, and the
mapper that projects a rectangle measured on a captured bitmap (origin
top-left, Y down) onto the exported page (origin bottom-left, Y up).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Size:
    width: float
    height: float

    @property
    def is_positive(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True, slots=True)
class Rect:
    """Origin + extent. Canvas rects are top-left based, document rects bottom-left."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True, slots=True)
class PixelRect:
    """Edges measured on a bitmap, relative to its top-left corner."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


def _require_positive(size: Size, label: str) -> None:
    if not size.is_positive:
        raise ValueError(f"{label} size must be positive, got {size.width}x{size.height}")


def map_bitmap_rect_to_document(rect: PixelRect, bitmap: Size, document: Size) -> Rect:
    """Project a bitmap rectangle onto the document page.

    X is proportional, Y is flipped: the document origin is bottom-left.
    Normalisation uses the bitmap's real size, which can differ from the
    nominal canvas when the capture ran at a device pixel ratio != 1.
    """
    _require_positive(bitmap, "bitmap")
    _require_positive(document, "document")

    return Rect(
        x=(rect.left / bitmap.width) * document.width,
        y=((bitmap.height - rect.bottom) / bitmap.height) * document.height,
        width=(rect.width / bitmap.width) * document.width,
        height=(rect.height / bitmap.height) * document.height,
    )


def map_document_rect_to_bitmap(rect: Rect, bitmap: Size, document: Size) -> PixelRect:
    """Inverse of :func:`map_bitmap_rect_to_document`."""
    _require_positive(bitmap, "bitmap")
    _require_positive(document, "document")

    left = (rect.x / document.width) * bitmap.width
    bottom = bitmap.height - (rect.y / document.height) * bitmap.height
    right = left + (rect.width / document.width) * bitmap.width
    top = bottom - (rect.height / document.height) * bitmap.height
    return PixelRect(left=left, top=top, right=right, bottom=bottom)
