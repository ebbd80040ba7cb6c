"""Profile storage protocol and an in-memory implementation.

The session asks a store for a profile at startup and hands it back to be
saved whenever the profile changes. The JSON-on-disk store used by the web
backend lives in ``backend.profile_persistence``.
"""

import logging
from typing import Any, Dict, Protocol, runtime_checkable

from angler.profile import PlayerProfile

logger = logging.getLogger(__name__)


@runtime_checkable
class ProfileStore(Protocol):
    """Loads and saves player profiles by id.

    ``load`` must never raise for missing or corrupt data; it returns the
    default profile instead.
    """

    def load(self, profile_id: str) -> PlayerProfile:
        ...

    def save(self, profile_id: str, profile: PlayerProfile) -> bool:
        ...


class InMemoryProfileStore:
    """Keeps snapshots in a dict. Used by tests and headless runs."""

    def __init__(self) -> None:
        self._snapshots: Dict[str, Dict[str, Any]] = {}
        self.save_count = 0

    def load(self, profile_id: str) -> PlayerProfile:
        snapshot = self._snapshots.get(profile_id)
        if snapshot is None:
            logger.debug("No stored profile %s, starting fresh", profile_id)
        return PlayerProfile.from_dict(snapshot)

    def save(self, profile_id: str, profile: PlayerProfile) -> bool:
        self._snapshots[profile_id] = profile.to_dict()
        self.save_count += 1
        return True

    def put_snapshot(self, profile_id: str, snapshot: Any) -> None:
        """Store a raw snapshot as-is, e.g. to exercise recovery of bad data."""
        self._snapshots[profile_id] = snapshot

    def get_snapshot(self, profile_id: str) -> Any:
        return self._snapshots.get(profile_id)
