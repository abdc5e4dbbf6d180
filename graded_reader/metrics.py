"""Prometheus metrics collection module."""

from typing import Any, Dict, List, Optional

from prometheus_client import Counter, Gauge, Histogram, start_http_server


class MetricsRegistry:
    """Registry for Prometheus metrics.

    Registering the same name twice returns the existing collector, so
    components can declare their metrics at construction time.
    """

    def __init__(self):
        """Initialize metrics registry."""
        self._metrics: Dict[str, Any] = {}

    def register_counter(
        self, name: str, description: str, labels: Optional[List[str]] = None
    ) -> Counter:
        """Register a new counter metric."""
        if name in self._metrics:
            return self._metrics[name]

        counter = Counter(name, description, labels or [])
        self._metrics[name] = counter
        return counter

    def register_gauge(
        self, name: str, description: str, labels: Optional[List[str]] = None
    ) -> Gauge:
        """Register a new gauge metric."""
        if name in self._metrics:
            return self._metrics[name]

        gauge = Gauge(name, description, labels or [])
        self._metrics[name] = gauge
        return gauge

    def register_histogram(
        self, name: str, description: str, labels: Optional[List[str]] = None
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

metrics.register_counter(
    "ingestion_items_total", "Feed items handled by the ingestion pipeline", ["status"]
)
metrics.register_histogram(
    "ingestion_run_duration_seconds", "Duration of a full ingestion run"
)
metrics.register_counter(
    "translation_requests_total", "Translation requests by backend and outcome", ["backend", "status"]
)
metrics.register_counter(
    "feed_fetch_total", "Feed downloads by outcome", ["status"]
)
metrics.register_counter(
    "scheduled_jobs_total", "Scheduled job executions", ["task", "status"]
)


def start_metrics_server(port: int = 8000) -> None:
    """Start a Prometheus metrics server on the specified port.

    Args:
        port: Port number for metrics server
    """
    start_http_server(port)
