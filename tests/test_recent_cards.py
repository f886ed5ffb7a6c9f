"""Recent cards history and its coordinator."""

import json
from datetime import datetime

import pytest

from cardcreator.common.errors import PersistenceError
from cardcreator.controllers.main_window import HistoryCoordinator, ProfileStateCoordinator
from cardcreator.schemas.profile_schema import ProfilePatch, ProfileRecord
from cardcreator.storage import STORAGE_KEY, JsonKeyValueStore, RecentCardsStore


class Clock:
    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        return self.now


def test_key_value_store_roundtrip(tmp_path):
    store = JsonKeyValueStore(tmp_path / "nested" / "store.json")
    assert store.get_item("k") is None
    store.set_item("k", "v")
    assert JsonKeyValueStore(tmp_path / "nested" / "store.json").get_item("k") == "v"
    store.remove_item("k")
    assert store.get_item("k") is None


def test_key_value_store_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        JsonKeyValueStore(path).get_item("k")


def test_most_recent_first_and_capped(tmp_path):
    clock = Clock()
    store = RecentCardsStore(JsonKeyValueStore(tmp_path / "h.json"), clock=clock)
    for i in range(7):
        clock.now += 1000
        store.save(ProfileRecord(name=f"Card {i}"))
    names = [card.data.name for card in store.list()]
    assert names == ["Card 6", "Card 5", "Card 4", "Card 3", "Card 2"]


def test_same_millisecond_ids_are_unique(tmp_path):
    store = RecentCardsStore(JsonKeyValueStore(tmp_path / "h.json"), clock=Clock())
    ids = [store.save(ProfileRecord(name=str(i))).id for i in range(3)]
    assert len(set(ids)) == 3
    assert ids[0] == "1700000000000"


def test_saved_entry_is_a_clone(history):
    record = ProfileRecord(name="Ana", highlights=["One"])
    history.save(record)
    record.highlights.append("Two")
    (card,) = history.list()
    assert card.data.highlights == ["One"]


def test_storage_layout_matches_local_storage_shape(tmp_path):
    path = tmp_path / "h.json"
    RecentCardsStore(JsonKeyValueStore(path), clock=Clock()).save(ProfileRecord(name="Ana"))
    raw = json.loads(json.loads(path.read_text(encoding="utf-8"))[STORAGE_KEY])
    assert set(raw[0]) == {"id", "data", "timestamp"}
    assert raw[0]["data"]["name"] == "Ana"
    assert raw[0]["timestamp"] == 1700000000000


def test_corrupt_history_reads_as_empty_and_recovers(tmp_path):
    path = tmp_path / "h.json"
    path.write_text("garbage", encoding="utf-8")
    store = RecentCardsStore(JsonKeyValueStore(path))
    assert store.list() == []
    assert store.save(ProfileRecord(name="Ana")) is not None
    assert [c.data.name for c in store.list()] == ["Ana"]


def test_unreadable_entries_are_skipped(tmp_path):
    path = tmp_path / "h.json"
    entries = [{"data": {"name": "no id"}}, {"id": "1", "data": {"name": "ok"}, "timestamp": 5}]
    path.write_text(json.dumps({STORAGE_KEY: json.dumps(entries)}), encoding="utf-8")
    assert [c.data.name for c in RecentCardsStore(JsonKeyValueStore(path)).list()] == ["ok"]


def test_unwritable_history_is_swallowed(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    store = RecentCardsStore(JsonKeyValueStore(blocker / "h.json"))
    assert store.save(ProfileRecord(name="Ana")) is None
    assert store.list() == []
    store.clear()


def test_remove_and_clear(history):
    first = history.save(ProfileRecord(name="A"))
    history.save(ProfileRecord(name="B"))
    assert history.remove(first.id)
    assert not history.remove("missing")
    assert [c.data.name for c in history.list()] == ["B"]
    history.clear()
    assert history.list() == []


def test_history_rows(tmp_path):
    store = RecentCardsStore(JsonKeyValueStore(tmp_path / "h.json"), clock=Clock())
    store.save(ProfileRecord())
    store.save(ProfileRecord(name="Ana Li", position="Engineer"))
    coordinator = HistoryCoordinator(store)

    rows = coordinator.list_card_rows()
    assert [r.display_name for r in rows] == ["Ana Li", "Unnamed Candidate"]
    assert rows[1].display_position == "No position"
    expected_date = datetime.fromtimestamp(1_700_000_000).strftime("%d/%m/%Y")
    assert rows[0].display_saved_at == expected_date
    assert rows[0].subtitle == f"Engineer • {expected_date}"


def test_loaded_card_is_a_fresh_copy(history):
    saved = history.save(ProfileRecord(name="Ana", highlights=["x"]))
    coordinator = HistoryCoordinator(history)
    loaded = coordinator.load_card(saved.id)
    loaded.highlights.append("y")
    assert coordinator.load_card(saved.id).highlights == ["x"]
    assert coordinator.load_card("nope") is None


def test_profile_state_notifies_and_patches():
    seen = []
    state = ProfileStateCoordinator()
    state.subscribe(seen.append)

    state.update_field("name", "  Ana ")
    state.apply_suggestions(ProfilePatch(position="Engineer", email=""))
    assert state.record.name == "Ana"
    assert state.record.position == "Engineer"
    assert [r.name for r in seen] == ["Ana", "Ana"]

    state.apply_suggestions(ProfilePatch())
    assert len(seen) == 2

    with pytest.raises(KeyError):
        state.update_field("nickname", "x")
