"""JSON-on-disk profile store.

Each profile is a single JSON document at ``<data_dir>/<profile_id>.json``
wrapping the profile snapshot with a schema version and a save timestamp.

Schema Versioning:
    - Version 1.0: Initial schema (profile snapshot under "profile")

Loading never raises: a missing file, unreadable JSON or a document of the
wrong shape is logged and yields the default profile. Field-level problems
inside the snapshot are handled by ``PlayerProfile.from_dict``.
"""

import logging
import os
import re
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import orjson

from angler.config.server import DEFAULT_DATA_DIR
from angler.exceptions import PersistenceError
from angler.profile import PlayerProfile

logger = logging.getLogger(__name__)

# Current schema version for saved profiles
SCHEMA_VERSION = "1.0"

_PROFILE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class JsonProfileStore:
    """Stores player profiles as JSON files in a directory."""

    def __init__(
        self,
        data_dir: Union[str, Path] = DEFAULT_DATA_DIR,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.data_dir = Path(data_dir)
        self._clock = clock

    def path_for(self, profile_id: str) -> Path:
        if not _PROFILE_ID_PATTERN.match(profile_id):
            raise PersistenceError(f"Invalid profile id: {profile_id!r}")
        return self.data_dir / f"{profile_id}.json"

    def exists(self, profile_id: str) -> bool:
        return self.path_for(profile_id).exists()

    def load(self, profile_id: str) -> PlayerProfile:
        """Load a profile, falling back to defaults on any read problem."""
        path = self.path_for(profile_id)
        if not path.exists():
            logger.info("No saved profile %s, starting fresh", profile_id)
            return self._from_snapshot(None)

        try:
            document = orjson.loads(path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning("Could not read profile %s from %s: %s", profile_id, path, e)
            return self._from_snapshot(None)

        if not isinstance(document, dict):
            logger.warning("Profile %s is not a JSON object; using defaults", profile_id)
            return self._from_snapshot(None)

        version = document.get("schema_version")
        if version != SCHEMA_VERSION:
            logger.warning(
                "Profile %s has schema version %r (expected %s); loading what we can",
                profile_id,
                version,
                SCHEMA_VERSION,
            )

        profile = self._from_snapshot(document.get("profile"))
        logger.info(
            "Loaded profile %s (gold=%d, rod level %d, %d items)",
            profile_id,
            profile.gold,
            profile.rod_level,
            len(profile.inventory),
        )
        return profile

    def save(self, profile_id: str, profile: PlayerProfile) -> bool:
        """Write the profile atomically; returns False if the write failed."""
        document = self.build_document(profile)
        try:
            self._write_atomic(self.path_for(profile_id), document)
        except (OSError, TypeError) as e:
            logger.error("Failed to save profile %s: %s", profile_id, e, exc_info=True)
            return False
        logger.debug("Saved profile %s", profile_id)
        return True

    def delete(self, profile_id: str) -> bool:
        path = self.path_for(profile_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted profile %s", profile_id)
        return True

    @staticmethod
    def build_document(profile: PlayerProfile) -> Dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "profile": profile.to_dict(),
        }

    def _from_snapshot(self, snapshot: Any) -> PlayerProfile:
        if self._clock is not None:
            return PlayerProfile.from_dict(snapshot, clock=self._clock)
        return PlayerProfile.from_dict(snapshot)

    def _write_atomic(self, path: Path, document: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(orjson.dumps(document, option=orjson.OPT_INDENT_2))
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
