"""Prometheus metrics collection module."""

from typing import Any, List

from prometheus_client import Counter, Gauge, Histogram


class MetricsRegistry:
    """Registry for Prometheus metrics.

    Registering an existing name returns the metric already registered, so
    several clients in one process share their collectors.
    """

    def __init__(self):
        """Initialize metrics registry."""
        self._metrics = {}

    def register_counter(self, name: str, description: str, labels: List[str] = None) -> Counter:
        """Register a new counter metric."""
        if name in self._metrics:
            return self._metrics[name]

        counter = Counter(name, description, labels or [])
        self._metrics[name] = counter
        return counter

    def register_gauge(self, name: str, description: str, labels: List[str] = None) -> Gauge:
        """Register a new gauge metric."""
        if name in self._metrics:
            return self._metrics[name]

        gauge = Gauge(name, description, labels or [])
        self._metrics[name] = gauge
        return gauge

    def register_histogram(
        self, name: str, description: str, labels: List[str] = None
    ) -> Histogram:
        """Register a new histogram metric."""
        if name in self._metrics:
            return self._metrics[name]

        histogram = Histogram(name, description, labels or [])
        self._metrics[name] = histogram
        return histogram

    def get_metric(self, name: str) -> Any:
        """Get a registered metric by name."""
        return self._metrics.get(name)


# Global metrics registry
metrics = MetricsRegistry()

# API client metrics
metrics.register_counter(
    "innochannel_api_requests_total", "Total number of API request attempts", ["method", "outcome"]
)
metrics.register_counter("innochannel_api_retries_total", "Total number of API request retries")
metrics.register_histogram(
    "innochannel_api_request_duration_seconds", "Duration of API request attempts"
)

# Webhook metrics
metrics.register_counter(
    "innochannel_webhooks_received_total", "Total number of webhooks received", ["outcome"]
)
metrics.register_counter(
    "innochannel_events_dispatched_total", "Total number of events dispatched", ["event"]
)
metrics.register_gauge("innochannel_event_listeners", "Number of registered event listeners")


def start_metrics_server(port: int = 8000):
    """Start a Prometheus metrics server on the specified port.

    Args:
        port: Port number for metrics server
    """
    from prometheus_client import start_http_server

    start_http_server(port)
