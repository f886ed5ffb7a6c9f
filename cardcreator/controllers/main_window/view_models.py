"""View-model dataclasses used by main window panels."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ...schemas.profile_schema import ProfileRecord


@dataclass(slots=True)
class RecentCardSummary:
    """Snapshot of a saved card for the recent list."""

    id: str
    name: str
    position: str
    saved_at: datetime
    record: ProfileRecord


@dataclass(slots=True)
class HistoryRowViewModel:
    """One line of the recent cards panel."""

    summary: RecentCardSummary
    display_name: str
    display_position: str
    display_saved_at: str

    @property
    def subtitle(self) -> str:
        return f"{self.display_position} • {self.display_saved_at}"
