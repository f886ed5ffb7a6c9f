"""
Card Creator Workers
====================

Workers QThread pour les tâches longues (autofill, export).
"""

from .autofill_worker import AutofillWorker
from .export_worker import ExportWorker

__all__ = [
    "AutofillWorker",
    "ExportWorker",
]
