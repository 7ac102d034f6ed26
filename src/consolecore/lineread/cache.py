"""Process-wide cache of line-reader contexts

A handful of slots, each a compare-and-swap cell. Closing a reader
publishes its cleaned context into an empty slot; opening one takes a
context from a full slot. Either way a slot has at most one owner.
"""

import threading
from typing import TYPE_CHECKING

from .. import capabilities as caps
from .. import config
from ..telemetry import get_logger, metrics

if TYPE_CHECKING:
    from .reader import LineReadContext

logger = get_logger(__name__)


class AtomicSlot:
    """Single value cell with compare-and-swap."""

    def __init__(self):
        self._value = None
        self._lock = threading.Lock()

    @property
    def value(self):
        return self._value

    def compare_and_swap(self, expected, new):
        """Store ``new`` if the cell holds ``expected``; return the prior value."""
        with self._lock:
            previous = self._value
            if previous is expected:
                self._value = new
            return previous


class LineReadCache:
    def __init__(self, slot_count: int = config.LINE_READ_CACHE_SLOTS, enabled: bool | None = None):
        if enabled is None:
            enabled = config.LINE_READ_CACHE_ENABLED and caps.has("atomic_slots")
        self.enabled = enabled
        self._slots = [AtomicSlot() for _ in range(slot_count)]

    def take(self) -> "LineReadContext | None":
        """Remove and return a cached context, if any."""
        if not self.enabled:
            return None
        for slot in self._slots:
            candidate = slot.value
            if candidate is not None and slot.compare_and_swap(candidate, None) is candidate:
                metrics.inc("lineread.cache.hit")
                logger.debug("Reusing cached line reader context")
                return candidate
        metrics.inc("lineread.cache.miss")
        return None

    def store(self, context: "LineReadContext") -> bool:
        """Publish a cleaned context; False when every slot is taken."""
        if not self.enabled:
            return False
        for slot in self._slots:
            if slot.compare_and_swap(None, context) is None:
                metrics.inc("lineread.cache.stored")
                return True
        metrics.inc("lineread.cache.dropped")
        return False

    def cleanup(self) -> int:
        """Empty every slot, releasing the cached buffers."""
        released = 0
        for slot in self._slots:
            context = slot.value
            if context is not None and slot.compare_and_swap(context, None) is context:
                context.buffer.cleanup()
                released += 1
        return released

    def __len__(self) -> int:
        return sum(1 for slot in self._slots if slot.value is not None)


line_read_cache = LineReadCache()
