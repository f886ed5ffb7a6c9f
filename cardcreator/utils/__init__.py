"""Utilities: geometry, asset resolution, lazy WeasyPrint."""
