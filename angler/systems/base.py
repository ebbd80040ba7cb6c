"""Base class and result type for per-frame session systems.

The clock/weather system and the event scheduler are both driven by the
session tick. They share a small contract:
- Each system has ONE responsibility
- Systems are initialized with their dependencies (RNG, clock functions)
- Systems can be enabled/disabled without code changes
- Systems return results describing what they did (for the orchestrator)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

__all__ = [
    "SystemResult",
    "BaseSystem",
]


@dataclass
class SystemResult:
    """Result of a system update cycle.

    Attributes:
        events_emitted: Number of domain events the update produced
        skipped: Whether the update was skipped (system disabled)
        details: System-specific details (e.g., {"weather_changed": True})

    Example:
        def _do_update(self, dt: float, frame: int) -> SystemResult:
            changed = self.roll()
            return SystemResult(details={"weather_changed": changed})
    """

    events_emitted: int = 0
    skipped: bool = False
    details: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def skipped_result() -> "SystemResult":
        """Create a result for when system update was skipped."""
        return SystemResult(skipped=True)

    @staticmethod
    def empty() -> "SystemResult":
        """Create an empty result (nothing happened)."""
        return SystemResult()


class BaseSystem(ABC):
    """Abstract base class for session systems.

    Subclasses implement ``_do_update(dt, frame)``; ``update`` handles the
    enabled flag and update counting.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._enabled = True
        self._update_count = 0

    @property
    def name(self) -> str:
        """Human-readable name for debugging and logging."""
        return self._name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def update_count(self) -> int:
        """Number of times update() has run while enabled."""
        return self._update_count

    def update(self, dt: float, frame: int = 0) -> SystemResult:
        """Perform the system's per-frame logic.

        Args:
            dt: Seconds since the previous tick (already clamped by the session)
            frame: Current session frame number

        Returns:
            SystemResult describing what the system did
        """
        if not self._enabled:
            return SystemResult.skipped_result()

        result = self._do_update(dt, frame)
        self._update_count += 1

        if result is None:
            return SystemResult.empty()
        return result

    @abstractmethod
    def _do_update(self, dt: float, frame: int) -> Optional[SystemResult]:
        """Implement system-specific update logic."""

    def get_debug_info(self) -> Dict[str, Any]:
        """Return debug information about this system's state."""
        return {
            "name": self._name,
            "enabled": self._enabled,
            "update_count": self._update_count,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r}, enabled={self._enabled})"
