"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

http_requests = Counter(
    'http_requests_total',
    'HTTP requests handled',
    ['method', 'status']
)

http_latency = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency',
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Storage collaborator metrics
storage_operations = Counter(
    'storage_operations_total',
    'Storage collaborator operations',
    ['operation', 'kind']  # query/insert/update/delete x events/locations/occurrences
)

storage_errors = Counter(
    'storage_errors_total',
    'Storage failures translated to StorageError',
    ['operation']
)

# Aggregation engine metrics
aggregation_latency = Histogram(
    'aggregation_latency_seconds',
    'Time spent building composite schedule views',
    ['view'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5]
)

delete_rejections = Counter(
    'delete_rejections_total',
    'Deletes rejected by referential-integrity checks',
    ['kind']
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_http_request(method: str, status: int, seconds: float):
    http_requests.labels(method=method, status=str(status)).inc()
    http_latency.observe(seconds)


def record_storage_operation(operation: str, kind: str):
    """Operation: query, insert, update, delete"""
    storage_operations.labels(operation=operation, kind=kind).inc()


def record_storage_error(operation: str):
    storage_errors.labels(operation=operation).inc()


def record_delete_rejection(kind: str):
    delete_rejections.labels(kind=kind).inc()


def time_aggregation(view: str):
    """Context manager timing one aggregation view build."""
    return aggregation_latency.labels(view=view).time()
