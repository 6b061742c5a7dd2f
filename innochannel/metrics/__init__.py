"""Prometheus metrics for the Innochannel SDK."""

from .prometheus import MetricsRegistry, metrics, start_metrics_server

__all__ = ["MetricsRegistry", "metrics", "start_metrics_server"]
