"""Infrastructure layer - cross-cutting concerns."""

from pipestore.infrastructure.config import Config, get_config
from pipestore.infrastructure.logging import setup_logging, get_logger
from pipestore.infrastructure.metrics import MetricsRegistry, get_metrics
from pipestore.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "MetricsRegistry",
    "get_metrics",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
