"""Pytest configuration and fixtures for fishing session tests."""

import random

import pytest

from angler.config.session_config import SessionConfig
from angler.profile import PlayerProfile
from angler.session import FishingSession
from tests.fakes.session_fakes import FakeClock, RecordingRenderer


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def profile():
    return PlayerProfile()


@pytest.fixture
def session(profile, seeded_rng, renderer, fake_clock):
    """A manual-play session with a recording renderer and fake wall clock."""
    return FishingSession(
        profile=profile,
        rng=seeded_rng,
        renderer=renderer,
        config=SessionConfig(auto_play=False),
        wall_clock=fake_clock,
    )
