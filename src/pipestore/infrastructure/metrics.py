"""Prometheus metrics for the record store."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all record store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Operation metrics
        self.operations_total = Counter(
            "pipestore_operations_total",
            "Total number of record store operations",
            ["operation", "status"],  # status: success, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "pipestore_operation_latency_seconds",
            "Operation latency in seconds, including flush and reload",
            ["operation"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

        # Flush metrics
        self.flushes_total = Counter(
            "pipestore_flushes_total",
            "Total whole-file rewrites",
            registry=self._registry,
        )

        self.flush_latency_seconds = Histogram(
            "pipestore_flush_latency_seconds",
            "Whole-file rewrite latency in seconds",
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5),
            registry=self._registry,
        )

        self.file_size_bytes = Gauge(
            "pipestore_file_size_bytes",
            "Size of the last flushed database file in bytes",
            registry=self._registry,
        )

        # Table metrics
        self.rows = Gauge(
            "pipestore_rows",
            "Number of rows per table after the last load",
            ["table"],
            registry=self._registry,
        )

        self.info = Info(
            "pipestore",
            "Record store information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
        from pipestore import __version__
        _metrics.info.info({"version": __version__})
    return _metrics
