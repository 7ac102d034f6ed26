"""Process-wide cancellation

A single event is set by Ctrl+C (once enabled) or explicitly by code.
Long waits sleep on the event so cancellation interrupts them.
"""

import signal
import threading

from ..telemetry import get_logger

logger = get_logger(__name__)


class CancelState:
    """Cancellation event plus the SIGINT hook that drives it."""

    def __init__(self):
        self.event = threading.Event()
        self._previous_handler = None
        self._enabled = False

    def enable(self) -> bool:
        """Route SIGINT to the cancel event.

        Returns:
            False when called off the main thread, where handlers cannot be set.
        """
        if self._enabled:
            return True
        if threading.current_thread() is not threading.main_thread():
            logger.warning("Cancel handler can only be installed from the main thread")
            return False
        self._previous_handler = signal.signal(signal.SIGINT, self._on_signal)
        self._enabled = True
        return True

    def disable(self) -> None:
        if not self._enabled:
            return
        signal.signal(signal.SIGINT, self._previous_handler or signal.default_int_handler)
        self._previous_handler = None
        self._enabled = False

    def _on_signal(self, signum, frame) -> None:
        logger.debug("SIGINT received, cancelling")
        self.event.set()

    def set(self) -> None:
        self.event.set()

    def reset(self) -> None:
        self.event.clear()

    def is_cancelled(self) -> bool:
        return self.event.is_set()

    def wait(self, timeout: float | None) -> bool:
        """Sleep up to ``timeout`` seconds; True if cancelled meanwhile."""
        return self.event.wait(timeout)


cancel_state = CancelState()


def cancel_enable() -> bool:
    return cancel_state.enable()


def cancel_set() -> None:
    cancel_state.set()


def cancel_reset() -> None:
    cancel_state.reset()


def is_operation_cancelled() -> bool:
    return cancel_state.is_cancelled()


def cancel_get_event() -> threading.Event:
    return cancel_state.event
