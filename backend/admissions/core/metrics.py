"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Admission matching metrics
admission_outcomes = Counter(
    'admission_outcomes_total',
    'Per-patient results of waitlist admission passes',
    ['outcome']  # admitted, ineligible, failed
)

admission_pass_latency = Histogram(
    'admission_pass_latency_seconds',
    'Duration of a full admit-from-waitlist pass',
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

waitlist_additions = Counter(
    'waitlist_additions_total',
    'Patients added to the admission waitlist'
)

# Complement provider metrics
complement_requests = Counter(
    'complement_requests_total',
    'Complement computations by provider and result',
    ['provider', 'result']  # local/remote/service, success/error
)

complement_retries = Counter(
    'complement_retry_attempts_total',
    'Retries of the remote complement call after a transient failure'
)

complement_latency = Histogram(
    'complement_latency_seconds',
    'Complement computation latency',
    ['provider'],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0]
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_admission_outcome(outcome: str):
    """Record one patient's matching result. Outcome: admitted, ineligible, failed"""
    admission_outcomes.labels(outcome=outcome).inc()


def record_complement(provider: str, success: bool):
    result = "success" if success else "error"
    complement_requests.labels(provider=provider, result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
