"""
Prometheus metrics for the grocery backend.

Tracks:
- HTTP request counts and latency
- Rate-limited requests
- Database connection attempts
- Offline worker fetch outcomes
"""
from prometheus_client import Counter, Histogram

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests handled",
    ["method", "path", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

rate_limited_requests_total = Counter(
    "rate_limited_requests_total",
    "Requests rejected by the /api rate limiter",
)

database_connection_attempts_total = Counter(
    "database_connection_attempts_total",
    "MongoDB connection attempts",
    ["outcome"],  # connected, failed
)

worker_fetches_total = Counter(
    "worker_fetches_total",
    "Offline worker passthrough fetches",
    ["outcome"],  # passthrough, fallback
)


class MetricsCollector:
    """Helper class for collecting metrics."""

    @staticmethod
    def record_http_request(
        method: str, path: str, status_code: int, duration_seconds: float
    ) -> None:
        """Record a completed HTTP request."""
        http_requests_total.labels(
            method=method, path=path, status_code=str(status_code)
        ).inc()
        http_request_duration_seconds.labels(method=method).observe(duration_seconds)

    @staticmethod
    def record_rate_limited() -> None:
        rate_limited_requests_total.inc()

    @staticmethod
    def record_database_connection(outcome: str) -> None:
        """Record a database connection attempt outcome."""
        database_connection_attempts_total.labels(outcome=outcome).inc()

    @staticmethod
    def record_worker_fetch(outcome: str) -> None:
        """Record an offline worker fetch outcome."""
        worker_fetches_total.labels(outcome=outcome).inc()


# Export singleton instance
metrics = MetricsCollector()
