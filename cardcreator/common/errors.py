"""Error taxonomy used across rendering, export and storage."""

from __future__ import annotations

from typing import Optional


class CardCreatorError(Exception):
    """Base class; ``user_message`` is safe to show in a dialog."""

    default_user_message = "Something went wrong."

    def __init__(self, message: str = "", *, user_message: Optional[str] = None) -> None:
        super().__init__(message or self.default_user_message)
        self.user_message = user_message or self.default_user_message


class InputValidationError(CardCreatorError):
    """Autofill produced malformed or missing fields; the card is untouched."""

    default_user_message = "The uploaded document could not be turned into card fields."


class AssetResolutionError(CardCreatorError):
    """An image or font asset could not be loaded. Always non-fatal."""

    default_user_message = "An image or font could not be loaded."

    def __init__(self, key: str, message: str = "") -> None:
        super().__init__(message or f"Asset {key!r} could not be resolved")
        self.key = key


class ExportError(CardCreatorError):
    """The document could not be produced or written."""

    default_user_message = "The card could not be exported."


class CaptureError(ExportError):
    """Rasterization of the live preview failed."""

    default_user_message = (
        "The preview could not be captured. Remove external images and try again."
    )


class PersistenceError(CardCreatorError):
    """The recent-cards history could not be read or written."""

    default_user_message = "Recent cards are unavailable."


class AutofillServiceError(CardCreatorError):
    """The résumé analysis service failed or is unreachable."""

    default_user_message = "The résumé analysis service is unavailable. Please try again later."
