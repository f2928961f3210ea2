"""Metrics collection for encode jobs."""

import threading
import time
from typing import Dict, Any
from collections import defaultdict


class MetricsCollector:
    """
    Collects counters and timers for encode jobs.
    Implements IMetricsCollector protocol.

    The supervisor's caller thread and the monitor thread both record
    into the same collector, so every access goes through one lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._start_time = time.monotonic()
        self._timers: Dict[str, float] = {}
        self._metrics: Dict[str, list] = defaultdict(list)
        self._counters: Dict[str, int] = defaultdict(int)

    def start_timer(self, name: str) -> None:
        with self._lock:
            self._timers[name] = time.monotonic()

    def stop_timer(self, name: str) -> float:
        """
        Stop a named timer and return elapsed time.

        Raises:
            KeyError: If timer was not started
        """
        with self._lock:
            if name not in self._timers:
                raise KeyError(f"Timer '{name}' was not started")
            elapsed = time.monotonic() - self._timers.pop(name)
            self._metrics[f"{name}_duration"].append(elapsed)
        return elapsed

    def has_timer(self, name: str) -> bool:
        with self._lock:
            return name in self._timers

    def record_metric(self, name: str, value: Any) -> None:
        with self._lock:
            self._metrics[name].append(value)

    def increment_counter(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def get_metric(self, name: str) -> list:
        with self._lock:
            return list(self._metrics.get(name, []))

    def get_summary(self) -> Dict[str, Any]:
        """Counters plus count/sum/avg/min/max for each numeric metric."""
        with self._lock:
            summary = {
                "total_elapsed": time.monotonic() - self._start_time,
                "counters": dict(self._counters),
                "metrics": {}
            }
            for name, values in self._metrics.items():
                if not values:
                    continue
                if all(isinstance(v, (int, float)) for v in values):
                    summary["metrics"][name] = {
                        "count": len(values),
                        "sum": sum(values),
                        "avg": sum(values) / len(values),
                        "min": min(values),
                        "max": max(values),
                    }
                else:
                    summary["metrics"][name] = {
                        "count": len(values),
                        "values": list(values)
                    }
        return summary

    def reset(self) -> None:
        with self._lock:
            self._start_time = time.monotonic()
            self._timers.clear()
            self._metrics.clear()
            self._counters.clear()
