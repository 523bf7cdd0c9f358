"""Observability layer: in-process metrics."""

from elgar.observability.metrics import MetricsCollector

__all__ = ["MetricsCollector"]
