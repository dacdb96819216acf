"""Prometheus metrics for the table store."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all table store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Operation metrics
        self.operations_total = Counter(
            "tablestore_operations_total",
            "Total number of state manager operations",
            ["operation", "status"],  # status: success, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "tablestore_operation_latency_seconds",
            "State manager operation latency in seconds",
            ["operation"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

        # Collection size
        self.tables = Gauge(
            "tablestore_tables",
            "Number of tables currently stored",
            registry=self._registry,
        )

        self.rows = Gauge(
            "tablestore_rows",
            "Total number of rows across all tables",
            registry=self._registry,
        )

        # Snapshot metrics
        self.snapshot_writes_total = Counter(
            "tablestore_snapshot_writes_total",
            "Total snapshot writes",
            ["status"],  # success, error
            registry=self._registry,
        )

        self.snapshot_write_latency_seconds = Histogram(
            "tablestore_snapshot_write_latency_seconds",
            "Snapshot write latency in seconds",
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5, 1.0),
            registry=self._registry,
        )

        # Server info
        self.info = Info(
            "tablestore",
            "Table store information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from tablestore import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
