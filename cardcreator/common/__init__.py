"""Shared building blocks (error taxonomy)."""

from .errors import (
    AssetResolutionError,
    AutofillServiceError,
    CaptureError,
    CardCreatorError,
    ExportError,
    InputValidationError,
    PersistenceError,
)

__all__ = [
    "AssetResolutionError",
    "AutofillServiceError",
    "CaptureError",
    "CardCreatorError",
    "ExportError",
    "InputValidationError",
    "PersistenceError",
]
