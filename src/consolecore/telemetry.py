"""Telemetry - logging and metrics entry point

A single logger factory and a metrics facade shared by every subsystem.

Log format: [module] msg
Metric examples: vt.escapes, lineread.cache.hit, path.enumerations,
filter.collector_failed
"""

import logging
import threading

from . import config

_LOG_FORMAT = "[%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module.

    Args:
        name: module name (normally ``__name__``)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_logging(level: str | None = None) -> None:
    """Attach a stderr handler for applications that embed the package.

    Args:
        level: level name, defaults to config.LOG_LEVEL
    """
    logging.basicConfig(format=_LOG_FORMAT, level=(level or config.LOG_LEVEL).upper())


class Metrics:
    """Metrics facade

    In-memory counters and gauges. Counters may be bumped from the pipe
    pump's worker threads, so updates take a lock.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._counters: dict[str, int] = {}
        self._gauges: dict[str, float] = {}
        self._lock = threading.Lock()

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        """Increment a counter.

        Args:
            name: metric name (e.g. "lineread.cache.hit")
            labels: optional labels (e.g. {"sink": "file-strip"})
            value: increment, default 1
        """
        if not self.enabled:
            return
        key = self._make_key(name, labels)
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + value

    def gauge(self, name: str, value: float, labels: dict[str, str] | None = None) -> None:
        """Set a gauge value.

        Args:
            name: metric name (e.g. "lineread.buffer_bytes")
            value: gauge value
            labels: optional labels
        """
        if not self.enabled:
            return
        key = self._make_key(name, labels)
        with self._lock:
            self._gauges[key] = value

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        """Read a counter (for tests)."""
        return self._counters.get(self._make_key(name, labels), 0)

    def get_gauge(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Read a gauge (for tests)."""
        return self._gauges.get(self._make_key(name, labels), 0.0)

    def reset(self) -> None:
        """Clear every metric (for tests)."""
        with self._lock:
            self._counters.clear()
            self._gauges.clear()

    def _make_key(self, name: str, labels: dict[str, str] | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"

    def get_all_counters(self) -> dict[str, int]:
        """Snapshot of all counters (for debugging)."""
        with self._lock:
            return dict(self._counters)

    def get_all_gauges(self) -> dict[str, float]:
        """Snapshot of all gauges (for debugging)."""
        with self._lock:
            return dict(self._gauges)


# Process-wide metrics instance
metrics = Metrics(enabled=config.METRICS_ENABLED)
