"""Angler: a casual fishing loop simulation.

The core package has no web or UI dependencies. A session is built from a
player profile, a seeded ``random.Random`` and optional renderer/event-bus
collaborators, then driven by ``FishingSession.update(dt)``.
"""

from angler.persistence import InMemoryProfileStore, ProfileStore
from angler.profile import PlayerProfile
from angler.protocols import NullRenderer, RigRenderer
from angler.session import FishingSession
from angler.state_machine import SessionPhase

__version__ = "0.3.0"

__all__ = [
    "FishingSession",
    "InMemoryProfileStore",
    "NullRenderer",
    "PlayerProfile",
    "ProfileStore",
    "RigRenderer",
    "SessionPhase",
]
