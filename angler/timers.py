"""Cooperative one-shot timers driven by the session tick.

The session runs on a single thread. Instead of real timers it keeps a
small heap of callbacks keyed by session time; ``advance(dt)`` moves the
clock forward and fires everything that came due, in due order. A callback
may schedule or cancel other timers while it runs.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(order=True)
class TimerHandle:
    """A scheduled callback. Compare by (due, seq) so ties fire in FIFO order."""

    due: float
    seq: int
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerScheduler:
    """Cancelable one-shot timers on a virtual clock."""

    def __init__(self) -> None:
        self._now = 0.0
        self._heap: List[TimerHandle] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def schedule(self, delay: float, callback: Callable[[], None], name: str = "") -> TimerHandle:
        """Run ``callback`` once, ``delay`` seconds of session time from now."""
        handle = TimerHandle(
            due=self._now + max(0.0, delay),
            seq=next(self._seq),
            name=name,
            callback=callback,
        )
        heapq.heappush(self._heap, handle)
        return handle

    def cancel(self, handle: Optional[TimerHandle]) -> bool:
        """Cancel a pending timer; returns False if it already fired or was cancelled."""
        if handle is None or not handle.pending:
            return False
        handle.cancelled = True
        return True

    def cancel_all(self) -> None:
        for handle in self._heap:
            handle.cancelled = True
        self._heap.clear()

    def advance(self, dt: float) -> int:
        """Move the clock forward and fire due timers; returns how many fired."""
        self._now += max(0.0, dt)
        fired = 0
        while self._heap and self._heap[0].due <= self._now:
            handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.fired = True
            fired += 1
            logger.debug("Timer fired: %s", handle.name or "<unnamed>")
            handle.callback()
        return fired

    def pending_count(self) -> int:
        return sum(1 for handle in self._heap if handle.pending)
