"""
Card Creator Controllers
========================

Scaling, document builders and export orchestration.
"""

from .capture_builder import CaptureAndMapDocumentBuilder, CaptureSnapshot, CaptureSurface, Hotspot
from .card_document import CardDocument, CardExport, ExportWarning
from .declarative_builder import DeclarativeDocumentBuilder
from .export_manager import DocumentExporter, ExportManager, ExportResult, ExportTicket, output_filename
from .scale_controller import ScaleController

__all__ = [
    "CaptureAndMapDocumentBuilder",
    "CaptureSnapshot",
    "CaptureSurface",
    "CardDocument",
    "CardExport",
    "DeclarativeDocumentBuilder",
    "DocumentExporter",
    "ExportManager",
    "ExportResult",
    "ExportTicket",
    "ExportWarning",
    "Hotspot",
    "ScaleController",
    "output_filename",
]
