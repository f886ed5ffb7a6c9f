"""History coordinator for the recent cards panel."""

from __future__ import annotations

from typing import List, Optional

from loguru import logger

from ...schemas.profile_schema import ProfileRecord
from ...storage.recent_cards import RecentCard, RecentCardsStore
from .base import Coordinator, SimpleCoordinator
from .view_models import HistoryRowViewModel, RecentCardSummary


class HistoryCoordinator(SimpleCoordinator, Coordinator):
    """Lists, reloads and clears recently exported cards."""

    __slots__ = ("_store",)

    def __init__(self, store: Optional[RecentCardsStore] = None) -> None:
        super().__init__()
        self._store = store or RecentCardsStore()

    @property
    def store(self) -> RecentCardsStore:
        return self._store

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_cards(self) -> List[RecentCardSummary]:
        """Return summaries ordered by recency."""
        return [self._to_summary(card) for card in self._store.list()]

    def list_card_rows(self) -> List[HistoryRowViewModel]:
        return [self.to_row_view_model(summary) for summary in self.list_cards()]

    def to_row_view_model(self, summary: RecentCardSummary) -> HistoryRowViewModel:
        return HistoryRowViewModel(
            summary=summary,
            display_name=summary.name or "Unnamed Candidate",
            display_position=summary.position or "No position",
            display_saved_at=summary.saved_at.strftime("%d/%m/%Y"),
        )

    def load_card(self, card_id: str) -> Optional[ProfileRecord]:
        """Return a fresh copy of a saved card, detached from the history."""
        card = self._store.get(card_id)
        if card is None:
            logger.warning(f"Recent card {card_id} not found")
            return None
        return card.data.snapshot()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def remember(self, record: ProfileRecord) -> Optional[RecentCardSummary]:
        card = self._store.save(record)
        return self._to_summary(card) if card else None

    def remove_card(self, card_id: str) -> bool:
        removed = self._store.remove(card_id)
        if removed:
            self.report("Card removed from history")
        return removed

    def clear_history(self) -> None:
        self._store.clear()
        self.report("Recent cards cleared")

    @staticmethod
    def _to_summary(card: RecentCard) -> RecentCardSummary:
        return RecentCardSummary(
            id=card.id,
            name=card.data.name,
            position=card.data.position,
            saved_at=card.saved_at,
            record=card.data,
        )
