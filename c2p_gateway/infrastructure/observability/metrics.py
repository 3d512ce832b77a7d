"""Prometheus metrics for monitoring C2P key requests, gateway errors, and retries"""

from prometheus_client import Counter, Histogram

# Verification outcomes
c2p_request_counter = Counter(
    "c2p_requests_total",
    "Total C2P key requests by outcome",
    ["outcome"],  # approved | rejected | failed
)

# Gateway metrics
gateway_latency_histogram = Histogram(
    "c2p_gateway_latency_seconds",
    "Mercantil C2P gateway response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

gateway_error_counter = Counter(
    "c2p_gateway_errors_total",
    "Classified gateway failures",
    ["code"],
)

retry_attempt_counter = Counter(
    "c2p_retry_attempts_total",
    "Gateway attempts retried after a retryable failure",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_outcome(outcome: str) -> None:
    c2p_request_counter.labels(outcome=outcome).inc()
