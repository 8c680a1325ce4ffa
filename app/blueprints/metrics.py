"""
Prometheus metrics: HTTP instrumentation plus pricing and quote counters.

/metrics is unauthenticated; keep it reachable only from the monitoring network.
"""
import os
import time

from flask import Blueprint, Response, g, request
from prometheus_client import (
    CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, Counter, Gauge, Histogram,
    generate_latest, multiprocess
)

metrics_bp = Blueprint('metrics', __name__)

# Gunicorn workers share samples through PROMETHEUS_MULTIPROC_DIR
MULTIPROCESS_MODE = 'PROMETHEUS_MULTIPROC_DIR' in os.environ

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    _register_in = None
else:
    registry = REGISTRY
    _register_in = REGISTRY

REQUESTS = Counter(
    'cotizador_http_requests_total',
    'HTTP requests by endpoint and status',
    ['method', 'endpoint', 'http_status'],
    registry=_register_in
)

LATENCY = Histogram(
    'cotizador_http_request_duration_seconds',
    'HTTP request latency',
    ['method', 'endpoint'],
    registry=_register_in,
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

IN_FLIGHT = Gauge(
    'cotizador_http_requests_in_flight',
    'Requests being processed',
    registry=_register_in
)

pricing_lookups_total = Counter(
    'cotizador_pricing_lookups_total',
    'Quantities priced against the tariff table',
    ['outcome'],  # matched, no_tariff, skipped
    registry=_register_in
)

quote_writes_total = Counter(
    'cotizador_quote_writes_total',
    'Successful quote write operations',
    ['operation'],  # create, status, approval, observation, delete
    registry=_register_in
)


def record_pricing(quantities, results):
    """Count one pricing outcome per quantity."""
    for quantity, result in zip(quantities, results):
        if quantity <= 0:
            outcome = 'skipped'
        elif result is None:
            outcome = 'no_tariff'
        else:
            outcome = 'matched'
        pricing_lookups_total.labels(outcome=outcome).inc()


def setup_metrics_instrumentation(app):
    """Install request hooks that feed the HTTP metrics."""

    @app.before_request
    def start_request_timer():
        g._metrics_started = time.perf_counter()
        IN_FLIGHT.inc()

    @app.after_request
    def record_request(response):
        started = g.pop('_metrics_started', None)
        if started is None:
            return response
        endpoint = request.endpoint or 'unknown'
        try:
            LATENCY.labels(method=request.method, endpoint=endpoint).observe(time.perf_counter() - started)
            REQUESTS.labels(method=request.method, endpoint=endpoint, http_status=response.status_code).inc()
        except ValueError as e:
            app.logger.warning(f"Failed to record metrics: {e}")
        finally:
            IN_FLIGHT.dec()
        return response


@metrics_bp.route('/metrics')
def metrics():
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
