"""Coordinators behind the main window, free of Qt imports."""

from .base import Coordinator, CoordinatorContext, SimpleCoordinator
from .history import HistoryCoordinator
from .profile_state import ProfileStateCoordinator
from .view_models import HistoryRowViewModel, RecentCardSummary

__all__ = [
    "Coordinator",
    "CoordinatorContext",
    "HistoryCoordinator",
    "HistoryRowViewModel",
    "ProfileStateCoordinator",
    "RecentCardSummary",
    "SimpleCoordinator",
]
