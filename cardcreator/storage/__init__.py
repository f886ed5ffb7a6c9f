"""Local persistence: key-value JSON store and the recent-cards history."""

from .json_store import JsonKeyValueStore
from .recent_cards import MAX_RECENT_CARDS, STORAGE_KEY, RecentCard, RecentCardsStore

__all__ = [
    "JsonKeyValueStore",
    "MAX_RECENT_CARDS",
    "RecentCard",
    "RecentCardsStore",
    "STORAGE_KEY",
]
