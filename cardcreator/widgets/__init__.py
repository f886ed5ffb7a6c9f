"""
Widgets réutilisables
=====================

- ScaledCardPreview: aperçu redimensionné de la carte
"""

from .scaled_preview import ScaledCardPreview

__all__ = [
    'ScaledCardPreview',
]
