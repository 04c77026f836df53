"""Prometheus metrics instrumentation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_fastapi_instrumentator import Instrumentator, metrics

from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI

    from recipes_api.core.config import Settings

logger = get_logger(__name__)

METRIC_NAMESPACE = "recipes_api"


def setup_metrics(app: FastAPI, settings: Settings) -> Instrumentator | None:
    """Instrument the app and expose ``{prefix}/metrics``.

    Collects request counts and latency grouped by status class, plus
    request/response sizes per handler. Probe and docs routes are excluded.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.

    Returns:
        The configured instrumentator, or None when metrics are disabled.
    """
    if not settings.observability.metrics.enabled:
        logger.info("Metrics collection disabled")
        return None

    prefix = settings.api.prefix
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[
            f"{prefix}/health",
            f"{prefix}/ready",
            f"{prefix}/metrics",
            "/openapi.json",
            "/docs",
            "/redoc",
        ],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.add(
        metrics.default(
            metric_namespace=METRIC_NAMESPACE,
            metric_subsystem="http",
            should_only_respect_2xx_for_highr=False,
        )
    )
    for size_metric in (metrics.request_size, metrics.response_size):
        instrumentator.add(
            size_metric(
                should_include_handler=True,
                should_include_method=True,
                should_include_status=True,
                metric_namespace=METRIC_NAMESPACE,
                metric_subsystem="http",
            )
        )

    instrumentator.instrument(app)
    endpoint = f"{prefix}/metrics"
    instrumentator.expose(app, endpoint=endpoint, tags=["Monitoring"])
    logger.info("Prometheus metrics configured", endpoint=endpoint)
    return instrumentator


__all__ = ["setup_metrics"]
