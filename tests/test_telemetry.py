"""Tests for telemetry.py"""

import logging

from consolecore.telemetry import Metrics, get_logger, metrics


class TestMetrics:
    """Counter and gauge bookkeeping."""

    def test_inc(self):
        m = Metrics()
        m.inc("vt.escapes")
        m.inc("vt.escapes", value=2)
        assert m.get_counter("vt.escapes") == 3

    def test_labels_are_part_of_key(self):
        m = Metrics()
        m.inc("vt.sink", {"sink": "file-strip"})
        assert m.get_counter("vt.sink", {"sink": "file-strip"}) == 1
        assert m.get_counter("vt.sink") == 0
        assert "vt.sink{sink=file-strip}" in m.get_all_counters()

    def test_gauge(self):
        m = Metrics()
        m.gauge("lineread.buffer_bytes", 1024)
        assert m.get_gauge("lineread.buffer_bytes") == 1024

    def test_disabled(self):
        m = Metrics(enabled=False)
        m.inc("x")
        m.gauge("y", 1)
        assert m.get_all_counters() == {}
        assert m.get_all_gauges() == {}

    def test_reset(self):
        metrics.inc("x")
        metrics.reset()
        assert metrics.get_counter("x") == 0


class TestLogger:
    def test_get_logger_uses_module_name(self):
        assert get_logger("consolecore.vt") is logging.getLogger("consolecore.vt")
