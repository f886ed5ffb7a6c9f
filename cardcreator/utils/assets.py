"""
Asset namespace
===============

Images and fonts are looked up by logical key so renderers never hardcode
paths. A key that cannot be resolved raises :class:`AssetResolutionError`;
callers treat it as a warning and drop the element.
"""

from __future__ import annotations

import base64
import binascii
import io
import mimetypes
import re
from pathlib import Path
from typing import Dict, Optional, Tuple

from loguru import logger
from PIL import Image, UnidentifiedImageError

from ..common.errors import AssetResolutionError, InputValidationError
from ..config import DEFAULT_CONFIG

# Candidates are tried in order; vector first, raster fallback.
ASSET_FILES: Dict[str, Tuple[str, ...]] = {
    "logo": ("logo.svg", "logo.png"),
    "status.contractor": ("Contractor-Status-Pill.svg", "Contractor-Status-Pill.png"),
    "status.direct_placement": ("Direct-Placement-Status-Pill.svg", "Direct-Placement-Status-Pill.png"),
    "status.contract_to_hire": ("Contract-to-Hire-Status-Pill.svg", "Contract-to-Hire-Status-Pill.png"),
    "button.resume": ("Resume-Button.svg", "Resume-Button.png"),
    "button.portfolio": ("Portfolio-Button.svg", "Portfolio-Button.png"),
    "placeholder.silhouette": ("silhouette.svg", "silhouette.png"),
    "font.heading": ("fonts/TerminaTest-Regular.otf", "fonts/Termina-Regular.otf"),
    "font.body": ("fonts/SpaceGrotesk-Regular.otf",),
    "font.body_bold": ("fonts/SpaceGrotesk-Bold.otf",),
}

FONT_KEYS = ("font.heading", "font.body", "font.body_bold")

_DATA_URI = re.compile(r"^data:(?P<mime>image/[\w.+\-]+);base64,(?P<data>.*)$", re.DOTALL)


class AssetRegistry:
    """Resolve logical asset keys against an assets directory."""

    def __init__(self, assets_dir: Optional[Path] = None) -> None:
        self.assets_dir = Path(assets_dir or DEFAULT_CONFIG.assets_dir)

    def resolve(self, key: str) -> Path:
        candidates = ASSET_FILES.get(key)
        if candidates is None:
            raise AssetResolutionError(key, f"Unknown asset key {key!r}")
        for relative in candidates:
            path = self.assets_dir / relative
            if path.is_file():
                return path
        raise AssetResolutionError(key, f"Asset {key!r} not found in {self.assets_dir}")

    def uri(self, key: str) -> str:
        """``file://`` URI of the asset, for HTML backends."""
        return self.resolve(key).resolve().as_uri()


def decode_data_uri(payload: str) -> Tuple[str, bytes]:
    """Split an inline ``data:image/...;base64,`` payload into (mime, bytes).

    Raster payloads are opened with Pillow so a truncated upload is caught
    here rather than by a renderer.
    """
    match = _DATA_URI.match((payload or "").strip())
    if not match:
        raise AssetResolutionError("profile_image", "Profile image is not an inline base64 image")
    mime = match.group("mime").lower()
    try:
        raw = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise AssetResolutionError("profile_image", f"Profile image payload is not valid base64: {exc}") from exc

    if not raw:
        raise AssetResolutionError("profile_image", "Profile image payload is empty")

    if mime != "image/svg+xml":
        try:
            with Image.open(io.BytesIO(raw)) as image:
                image.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise AssetResolutionError("profile_image", f"Profile image cannot be decoded: {exc}") from exc

    logger.debug(f"Decoded inline profile image ({mime}, {len(raw)} bytes)")
    return mime, raw


def encode_data_uri(raw: bytes, mime: str = "image/png") -> str:
    """Inline an image as a ``data:`` URI (image upload path)."""
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"


def load_image_file(path) -> str:
    """Read a picked photo and return it as an inline payload.

    Raises :class:`InputValidationError` when the file cannot be read or is
    not an image; the current photo is left alone in that case.
    """
    path = Path(path)
    mime = mimetypes.guess_type(path.name)[0] or ""
    if not mime.startswith("image/"):
        raise InputValidationError(f"{path.name} is not an image ({mime or 'unknown type'})",
                                   user_message=f"{path.name} is not an image file.")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        logger.error(f"Could not read photo {path}: {exc}")
        raise InputValidationError(str(exc), user_message=f"Could not read {path.name}.") from exc

    payload = encode_data_uri(raw, mime)
    try:
        decode_data_uri(payload)
    except AssetResolutionError as exc:
        raise InputValidationError(str(exc), user_message=f"{path.name} is not a readable image.") from exc
    logger.debug(f"Loaded photo {path.name} ({len(raw)} bytes, {mime})")
    return payload
