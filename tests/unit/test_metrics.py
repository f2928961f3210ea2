"""
Unit tests for MetricsCollector.
"""

import threading

import pytest

from subburn.shared.metrics import MetricsCollector


class TestMetricsCollector:
    """Test MetricsCollector."""

    def test_timer(self):
        metrics = MetricsCollector()
        metrics.start_timer("encode")

        assert metrics.has_timer("encode")
        elapsed = metrics.stop_timer("encode")

        assert elapsed >= 0
        assert not metrics.has_timer("encode")
        assert metrics.get_metric("encode_duration") == [elapsed]

    def test_stop_unknown_timer(self):
        with pytest.raises(KeyError):
            MetricsCollector().stop_timer("missing")

    def test_counters_across_threads(self):
        metrics = MetricsCollector()

        def work():
            for _ in range(1000):
                metrics.increment_counter("log_lines")

        threads = [threading.Thread(target=work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert metrics.get_counter("log_lines") == 4000
        assert metrics.get_counter("missing") == 0

    def test_summary(self):
        metrics = MetricsCollector()
        metrics.increment_counter("jobs_started")
        metrics.record_metric("fps", 20.0)
        metrics.record_metric("fps", 30.0)
        metrics.record_metric("codec", "libx264")

        summary = metrics.get_summary()

        assert summary["counters"] == {"jobs_started": 1}
        assert summary["metrics"]["fps"]["avg"] == 25.0
        assert summary["metrics"]["codec"] == {"count": 1, "values": ["libx264"]}

    def test_reset(self):
        metrics = MetricsCollector()
        metrics.increment_counter("jobs_failed")
        metrics.start_timer("encode")

        metrics.reset()

        assert metrics.get_counter("jobs_failed") == 0
        assert not metrics.has_timer("encode")
