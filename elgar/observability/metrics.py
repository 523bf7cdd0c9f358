"""Prometheus-style counters for guard decisions and report transitions. Thread-safe, in-memory."""

import threading
from typing import Any


class MetricsCollector:
    """
    In-memory registry of counters, optionally split by a single category label.
    Thread-safe. Exposes increment, export_metrics, reset.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, float] = {}
        # name -> {"name:category=<label>" -> value}
        self._counters_by_labels: dict[str, dict[str, float]] = {}

    def increment(
        self,
        name: str,
        value: float = 1.0,
        *,
        category: str | None = None,
    ) -> None:
        """Increment a counter. With category, the count is kept per label."""
        with self._lock:
            if category is None:
                self._counters[name] = self._counters.get(name, 0) + value
                return
            key = f"{name}:category={category}"
            labels = self._counters_by_labels.setdefault(name, {})
            labels[key] = labels.get(key, 0) + value

    def export_metrics(self) -> dict[str, Any]:
        """Snapshot of all counters."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_labels": {
                    k: dict(v) for k, v in self._counters_by_labels.items()
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._counters.clear()
            self._counters_by_labels.clear()
