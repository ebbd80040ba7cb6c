"""Tests for the JSON-on-disk profile store."""

import orjson
import pytest

from angler.catalog import get_species
from angler.exceptions import PersistenceError
from angler.profile import PlayerProfile
from angler.systems.events import ActiveEvent, EventType
from backend.profile_persistence import SCHEMA_VERSION, JsonProfileStore


@pytest.fixture
def store(tmp_path):
    return JsonProfileStore(tmp_path)


def test_missing_profile_loads_defaults(store):
    profile = store.load("player")
    assert profile.gold == 250
    assert not store.exists("player")


def test_save_and_load_round_trip(store, tmp_path):
    profile = PlayerProfile(gold=777, rod_level=3)
    profile.record_catch(get_species("blue"), 90, ts=5.0, item_id="i1")

    assert store.save("player", profile)

    document = orjson.loads((tmp_path / "player.json").read_bytes())
    assert document["schema_version"] == SCHEMA_VERSION
    assert "saved_at" in document
    assert document["profile"]["gold"] == 777

    loaded = store.load("player")
    assert loaded.to_dict() == profile.to_dict()


def test_save_leaves_no_temp_files(store, tmp_path):
    store.save("player", PlayerProfile())
    store.save("player", PlayerProfile(gold=1))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["player.json"]


@pytest.mark.parametrize("content", [b"{not json", b"[1, 2, 3]", b"\"text\""])
def test_unreadable_document_loads_defaults(store, tmp_path, content):
    (tmp_path / "player.json").write_bytes(content)
    assert store.load("player").to_dict() == PlayerProfile().to_dict()


def test_unknown_schema_version_still_loads(store, tmp_path):
    document = {"schema_version": "0.1", "profile": {"gold": 5}}
    (tmp_path / "player.json").write_bytes(orjson.dumps(document))
    assert store.load("player").gold == 5


def test_malformed_fields_are_merged_over_defaults(store, tmp_path):
    document = {"schema_version": SCHEMA_VERSION, "profile": {"gold": "x", "rod_level": 4}}
    (tmp_path / "player.json").write_bytes(orjson.dumps(document))
    loaded = store.load("player")
    assert loaded.gold == 250
    assert loaded.rod_level == 4


def test_expired_event_dropped_using_store_clock(tmp_path):
    store = JsonProfileStore(tmp_path, clock=lambda: 1000.0)
    profile = PlayerProfile(saved_event=ActiveEvent(EventType.LUCKY_WATERS, "Lucky Waters", 900.0))
    store.save("player", profile)
    assert store.load("player").saved_event is None

    later = JsonProfileStore(tmp_path, clock=lambda: 500.0)
    assert later.load("player").saved_event.type is EventType.LUCKY_WATERS


@pytest.mark.parametrize("profile_id", ["", "../escape", "a/b", "x" * 65])
def test_invalid_profile_id_rejected(store, profile_id):
    with pytest.raises(PersistenceError):
        store.path_for(profile_id)


def test_save_failure_returns_false(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("occupied")
    store = JsonProfileStore(blocker / "profiles")
    assert store.save("player", PlayerProfile()) is False


def test_delete(store):
    store.save("player", PlayerProfile())
    assert store.delete("player")
    assert not store.delete("player")
    assert not store.exists("player")
