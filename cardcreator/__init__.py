"""
Candidate Card Creator
======================

Package principal de l'application contenant:
- schemas: Modèles Pydantic (profil, gabarit de carte)
- controllers: Construction et export des documents
- views / widgets: Interface PySide6 (aperçu mis à l'échelle)
- workers: Tâches en arrière-plan
- services: Services externes (autofill IA)
- utils: Géométrie, assets, WeasyPrint paresseux
- logging: Journalisation loguru avec masquage des PII
"""

__version__ = "1.0.0"
