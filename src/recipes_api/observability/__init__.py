"""Observability components: logging, metrics, and tracing."""

from recipes_api.observability.logging import (
    bind_context,
    clear_context,
    get_context,
    get_logger,
    logger,
    setup_logging,
)
from recipes_api.observability.metrics import setup_metrics
from recipes_api.observability.tracing import setup_tracing, shutdown_tracing


__all__ = [
    "bind_context",
    "clear_context",
    "get_context",
    "get_logger",
    "logger",
    "setup_logging",
    "setup_metrics",
    "setup_tracing",
    "shutdown_tracing",
]
