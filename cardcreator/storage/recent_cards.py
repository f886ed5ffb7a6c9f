"""
Recent Cards
============

The last few exported cards, most recent first. Each entry is a detached
snapshot of the record at save time; later edits never reach it. History is
a convenience: every storage failure is logged and the feature degrades to
an empty list.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from ..common.errors import PersistenceError
from ..config import DEFAULT_CONFIG
from ..schemas.profile_schema import ProfileRecord
from .json_store import JsonKeyValueStore

STORAGE_KEY = "candidate-card-creator-recent-cards"
MAX_RECENT_CARDS = 5


@dataclass(frozen=True, slots=True)
class RecentCard:
    id: str
    data: ProfileRecord
    timestamp: int

    @property
    def saved_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000)

    def to_json(self) -> Dict[str, Any]:
        return {"id": self.id, "data": self.data.model_dump(mode="json"), "timestamp": self.timestamp}


def _now_ms() -> int:
    return int(time.time() * 1000)


class RecentCardsStore:
    """Bounded, most-recent-first history of saved cards."""

    def __init__(
        self,
        store: Optional[JsonKeyValueStore] = None,
        max_entries: int = MAX_RECENT_CARDS,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.store = store or JsonKeyValueStore(DEFAULT_CONFIG.history_path)
        self.max_entries = max(1, max_entries)
        self._clock = clock

    @classmethod
    def at(cls, path: Path, max_entries: int = MAX_RECENT_CARDS) -> 'RecentCardsStore':
        return cls(JsonKeyValueStore(path), max_entries=max_entries)

    def _load_raw(self) -> List[Dict[str, Any]]:
        entries = self.store.get_json(STORAGE_KEY, default=[])
        if not isinstance(entries, list):
            raise PersistenceError("Recent cards entry is not a list")
        return [e for e in entries if isinstance(e, dict)]

    def list(self) -> List[RecentCard]:
        try:
            raw_entries = self._load_raw()
        except PersistenceError as exc:
            logger.warning(f"Recent cards unavailable: {exc}")
            return []

        cards = []
        for entry in raw_entries:
            try:
                cards.append(RecentCard(
                    id=str(entry["id"]),
                    data=ProfileRecord.model_validate(entry.get("data") or {}),
                    timestamp=int(entry.get("timestamp") or 0),
                ))
            except (KeyError, TypeError, ValueError, ValidationError) as exc:
                logger.warning(f"Skipping unreadable recent card: {exc}")
        return cards

    def save(self, record: ProfileRecord) -> Optional[RecentCard]:
        """Prepend a snapshot of ``record``; the oldest entries fall off."""
        try:
            existing = self._load_raw()
        except PersistenceError as exc:
            logger.warning(f"Recent cards unreadable, starting a new history: {exc}")
            existing = []

        timestamp = self._clock()
        taken = {str(e.get("id")) for e in existing}
        card_id = str(timestamp)
        suffix = 1
        while card_id in taken:
            card_id = f"{timestamp}-{suffix}"
            suffix += 1

        card = RecentCard(id=card_id, data=record.snapshot(), timestamp=timestamp)
        entries = [card.to_json(), *existing][: self.max_entries]
        try:
            self.store.set_json(STORAGE_KEY, entries)
        except PersistenceError as exc:
            logger.warning(f"Could not save recent card: {exc}")
            return None
        logger.info(f"Saved recent card {card_id} ({len(entries)}/{self.max_entries})")
        return card

    def get(self, card_id: str) -> Optional[RecentCard]:
        return next((card for card in self.list() if card.id == card_id), None)

    def remove(self, card_id: str) -> bool:
        try:
            existing = self._load_raw()
            remaining = [e for e in existing if str(e.get("id")) != card_id]
            if len(remaining) == len(existing):
                return False
            self.store.set_json(STORAGE_KEY, remaining)
        except PersistenceError as exc:
            logger.warning(f"Could not remove recent card {card_id}: {exc}")
            return False
        return True

    def clear(self) -> None:
        try:
            self.store.remove_item(STORAGE_KEY)
        except PersistenceError as exc:
            logger.warning(f"Could not clear recent cards: {exc}")
