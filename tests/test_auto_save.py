"""Tests for the debounced profile auto-save service."""

import asyncio

import pytest

from angler.events import EventBus, ProfileChangedEvent
from angler.persistence import InMemoryProfileStore
from angler.profile import PlayerProfile
from backend.auto_save_service import AutoSaveService


class FailingStore(InMemoryProfileStore):
    def save(self, profile_id, profile):
        return False


def make_service(store, profile, bus, debounce=0.05):
    return AutoSaveService(
        store=store,
        profile_id="player",
        get_profile=lambda: profile,
        event_bus=bus,
        debounce_seconds=debounce,
    )


@pytest.mark.asyncio
async def test_burst_of_changes_saved_once():
    store, profile, bus = InMemoryProfileStore(), PlayerProfile(), EventBus()
    service = make_service(store, profile, bus)
    await service.start()

    for frame in range(5):
        profile.gold += 10
        bus.emit(ProfileChangedEvent(reason="catch", frame=frame))
    await asyncio.sleep(0.3)

    assert store.save_count == 1
    assert store.get_snapshot("player")["gold"] == 300
    assert not service.dirty
    await service.stop()
    assert store.save_count == 1


@pytest.mark.asyncio
async def test_stop_flushes_pending_changes():
    store, profile, bus = InMemoryProfileStore(), PlayerProfile(), EventBus()
    service = make_service(store, profile, bus, debounce=30.0)
    await service.start()

    profile.rod_level = 4
    bus.emit(ProfileChangedEvent(reason="upgrade_rod", frame=1))
    await service.stop()

    assert store.save_count == 1
    assert store.get_snapshot("player")["rod_level"] == 4
    assert not bus.has_subscribers(ProfileChangedEvent)


@pytest.mark.asyncio
async def test_saved_copy_is_detached_from_live_profile():
    store, profile, bus = InMemoryProfileStore(), PlayerProfile(), EventBus()
    service = make_service(store, profile, bus)
    await service.start()
    assert await service.save_now()
    profile.gold = 0
    assert store.get_snapshot("player")["gold"] == 250
    await service.stop()


@pytest.mark.asyncio
async def test_failed_save_stays_dirty():
    store, profile, bus = FailingStore(), PlayerProfile(), EventBus()
    service = make_service(store, profile, bus)
    await service.start()
    bus.emit(ProfileChangedEvent(reason="catch", frame=1))
    await asyncio.sleep(0.2)
    assert service.dirty
    assert service.save_count == 0
    await service.stop()


@pytest.mark.asyncio
async def test_start_twice_is_harmless():
    service = make_service(InMemoryProfileStore(), PlayerProfile(), EventBus())
    await service.start()
    await service.start()
    await service.stop()
    await service.stop()
