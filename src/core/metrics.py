"""Prometheus metrics for the KHQR Gateway service.

Metrics are organized into two categories:

Business Metrics:
- khqr_generated_total: QR payloads generated by currency
- khqr_payment_status_total: Status checks by resolved status and strategy
- khqr_manual_settle_total: Demo manual settlements

Technical Metrics:
- khqr_bakong_latency_seconds: Bakong API latency by endpoint
- khqr_bakong_requests_total: Bakong API requests by endpoint/outcome
- khqr_bakong_failures_total: Bakong API transport failures by error code
- khqr_bakong_retry_total: Retried Bakong API calls
- khqr_bakong_ipv4_fallback_total: IPv4 fallback attempts
- khqr_deeplink_total: Deeplink generation outcomes
- khqr_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics
# =============================================================================

khqr_generated_total = Counter(
    "khqr_generated_total",
    "Total number of KHQR payment payloads generated",
    ["currency"],
)

payment_status_total = Counter(
    "khqr_payment_status_total",
    "Payment status checks by resolved status",
    ["status", "checked_by"],  # pending/completed/failed/error; md5/short_hash/manual
)

manual_settle_total = Counter(
    "khqr_manual_settle_total",
    "Payments marked as completed manually (demo mode)",
)


# =============================================================================
# Technical Metrics
# =============================================================================

bakong_latency = Histogram(
    "khqr_bakong_latency_seconds",
    "Bakong API request latency in seconds",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

bakong_requests_total = Counter(
    "khqr_bakong_requests_total",
    "Total number of Bakong API requests",
    ["endpoint", "status"],  # success, failure
)

bakong_failures = Counter(
    "khqr_bakong_failures_total",
    "Bakong API transport failures",
    ["error_code"],  # TIMEOUT, NETWORK_ERROR, INVALID_RESPONSE, MISSING_TOKEN, http status
)

bakong_retries = Counter(
    "khqr_bakong_retry_total",
    "Total number of retried Bakong API calls",
)

bakong_ipv4_fallbacks = Counter(
    "khqr_bakong_ipv4_fallback_total",
    "Total number of requests re-sent over IPv4",
)

deeplink_total = Counter(
    "khqr_deeplink_total",
    "Deeplink generation outcomes",
    ["mode", "outcome"],  # sync/async; success/unavailable/error
)

http_requests_total = Counter(
    "khqr_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "khqr_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_khqr_generated(currency: str) -> None:
    """Record a generated QR payload."""
    khqr_generated_total.labels(currency=currency).inc()


def record_payment_status(status: str, checked_by: str) -> None:
    """Record the outcome of a payment status check."""
    payment_status_total.labels(status=status, checked_by=checked_by).inc()


def record_manual_settle() -> None:
    manual_settle_total.inc()


@contextmanager
def track_bakong_latency(endpoint: str) -> Generator[None, None, None]:
    """Context manager to track Bakong API latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        bakong_latency.labels(endpoint=endpoint).observe(duration)


def record_bakong_success(endpoint: str) -> None:
    """Record a Bakong API call that produced a provider response."""
    bakong_requests_total.labels(endpoint=endpoint, status="success").inc()


def record_bakong_failure(endpoint: str, error_code: str) -> None:
    """Record a Bakong API call that failed before a provider response."""
    bakong_requests_total.labels(endpoint=endpoint, status="failure").inc()
    bakong_failures.labels(error_code=error_code).inc()


def record_bakong_retry() -> None:
    bakong_retries.inc()


def record_ipv4_fallback() -> None:
    bakong_ipv4_fallbacks.inc()


def record_deeplink(mode: str, outcome: str) -> None:
    """Record a deeplink generation outcome."""
    deeplink_total.labels(mode=mode, outcome=outcome).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
